# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson prerequisite graph validation.

Lessons reference their prerequisites by id. The resulting directed graph
must stay free of self-loops and cycles, and every edge must point at a
lesson that exists. Validation works on an id-indexed map of the whole
graph with the edited lesson's new edges substituted in, before anything
is written.
"""

from collections.abc import Iterable, Mapping

from learnhub.core.errors import ValidationError


class PrerequisiteError(ValidationError):
    """Raised when a prerequisite list would corrupt the lesson graph."""

    pass


def validate_prerequisites(
    lesson_id: str,
    prerequisite_ids: Iterable[str],
    graph: Mapping[str, Iterable[str]],
) -> list[str]:
    """Validate the new prerequisite list of one lesson.

    Args:
        lesson_id: Id of the lesson being saved (may be new).
        prerequisite_ids: Proposed prerequisite ids for that lesson.
        graph: Current graph as ``{lesson id: prerequisite ids}`` for every
            existing lesson.

    Returns:
        The prerequisite ids with duplicates removed, order preserved.

    Raises:
        PrerequisiteError: On a self reference, an unknown lesson id or
            a cycle.
    """
    edges = list(dict.fromkeys(prerequisite_ids))

    if lesson_id in edges:
        raise PrerequisiteError("A lesson cannot be its own prerequisite")

    unknown = [pid for pid in edges if pid not in graph]
    if unknown:
        raise PrerequisiteError(f"Unknown prerequisite lesson(s): {', '.join(unknown)}")

    candidate = {key: list(value) for key, value in graph.items()}
    candidate[lesson_id] = edges

    cycle = find_cycle(candidate, start=lesson_id)
    if cycle:
        raise PrerequisiteError(
            "Prerequisites would create a cycle: " + " -> ".join(cycle)
        )

    return edges


def find_cycle(graph: Mapping[str, Iterable[str]], start: str) -> list[str] | None:
    """Find a cycle reachable from ``start``.

    Iterative depth-first search; edges to ids missing from the graph are
    ignored.

    Returns:
        The cycle as a list of ids (first id repeated at the end), or None.
    """
    visiting: list[str] = []
    on_path: set[str] = set()
    done: set[str] = set()
    stack: list[tuple[str, Iterable[str]]] = [(start, iter(graph.get(start, ())))]
    visiting.append(start)
    on_path.add(start)

    while stack:
        node, children = stack[-1]
        advanced = False
        for child in children:
            if child not in graph or child in done:
                continue
            if child in on_path:
                return visiting[visiting.index(child):] + [child]
            stack.append((child, iter(graph[child])))
            visiting.append(child)
            on_path.add(child)
            advanced = True
            break
        if not advanced:
            stack.pop()
            visiting.pop()
            on_path.discard(node)
            done.add(node)

    return None
