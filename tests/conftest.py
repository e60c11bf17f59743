# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests (SQLite database file per test)
"""

import os

# Settings are read at import time by the rate limiter, so the test
# environment must be in place before learnhub is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator, Sequence
from datetime import datetime
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.infrastructure.database.connection import create_engine_from_url, create_sessionmaker
from learnhub.infrastructure.database.models import (
    USER_STATUS_INACTIVE,
    Base,
    Classroom,
    Course,
    Instructor,
    Lesson,
    Student,
)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create an engine on a fresh SQLite file with every table."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'learnhub.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker configured like the application's."""
    return create_sessionmaker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(db_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for database tests."""
    async with db_sessionmaker() as session:
        yield session
        await session.rollback()


class ModelFactory:
    """Inserts committed rows for tests."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def student(self, email: str = "ada@example.com", **kwargs: Any) -> Student:
        student = Student(
            username=email,
            password_hash="not-a-real-hash",
            first_name=kwargs.pop("first_name", "Ada"),
            last_name=kwargs.pop("last_name", "Lovelace"),
            status=USER_STATUS_INACTIVE,
            **kwargs,
        )
        self.session.add(student)
        await self.session.commit()
        return student

    async def instructor(self, email: str = "grace@example.com") -> Instructor:
        instructor = Instructor(
            username=email,
            password_hash="not-a-real-hash",
            first_name="Grace",
            last_name="Hopper",
            status=USER_STATUS_INACTIVE,
        )
        self.session.add(instructor)
        await self.session.commit()
        return instructor

    async def lesson(
        self,
        owner: Instructor,
        lesson_id: str,
        credit_points: float = 10,
        status: str = "Published",
        prerequisites: Sequence[str] = (),
    ) -> Lesson:
        lesson = Lesson(
            lesson_id=lesson_id,
            title=f"Lesson {lesson_id}",
            created_by=owner.id,
            status=status,
            credit_points=credit_points,
            prerequisite_ids=list(prerequisites),
            readings=[],
            assignments=[],
            estimated_work=2,
        )
        self.session.add(lesson)
        await self.session.commit()
        return lesson

    async def course(
        self,
        owner: Instructor,
        course_id: str,
        lessons: Sequence[Lesson] = (),
        status: str = "Published",
    ) -> Course:
        course = Course(
            course_id=course_id,
            title=f"Course {course_id}",
            status=status,
            total_credit=0,
            owner_id=owner.id,
            lessons=[],
            students=[],
        )
        self.session.add(course)
        await self.session.flush()
        await EnrollmentCoordinator(self.session).on_course_lessons_saved(
            course, [lesson.id for lesson in lessons]
        )
        await self.session.commit()
        return course

    async def classroom(
        self,
        owner: Instructor,
        classroom_id: str,
        courses: Sequence[Course] = (),
        lessons: Sequence[Lesson] = (),
        status: str = "Published",
        start_time: datetime | None = None,
        duration: float | None = None,
    ) -> Classroom:
        classroom = Classroom(
            classroom_id=classroom_id,
            title=f"Classroom {classroom_id}",
            owner_id=owner.id,
            status=status,
            start_time=start_time,
            duration=duration,
            num_students=0,
            courses=list(courses),
            lessons=list(lessons),
            students=[],
        )
        self.session.add(classroom)
        await self.session.commit()
        return classroom


@pytest.fixture
def factory(db_session: AsyncSession) -> ModelFactory:
    """Row factory bound to the test session."""
    return ModelFactory(db_session)
