# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API route modules."""

from fastapi import APIRouter

from learnhub.api.routes import auth, classrooms, courses, grades, health, instructors, lessons, students

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(lessons.router, prefix="/lessons", tags=["Lessons"])
router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(classrooms.router, prefix="/classrooms", tags=["Classrooms"])
router.include_router(grades.router, prefix="/grades", tags=["Grades"])
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(instructors.router, prefix="/instructors", tags=["Instructors"])

__all__ = ["router", "health"]
