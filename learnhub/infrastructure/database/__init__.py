# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the relational store.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for development
and tests. One async session per request; every table is created from
the ORM metadata at startup.

Example:
    from learnhub.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(Course))
"""

from learnhub.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]
