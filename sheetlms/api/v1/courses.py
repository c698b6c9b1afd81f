# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

This module provides endpoints for browsing and authoring courses:
- GET / - Paginated course listing
- GET /categories - Unique categories
- GET /{course_id} - Course with modules and lessons
- POST / - Create a course (instructor/admin)
- POST /{course_id}/modules - Add a module (instructor/admin)

Example:
    GET /api/courses?page=1&limit=10&category=programming
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from sheetlms.api.dependencies import get_catalog_service, get_optional_user, require_instructor
from sheetlms.api.middleware.auth import CurrentUser
from sheetlms.api.responses import ApiResponse
from sheetlms.domains.catalog.service import CatalogService
from sheetlms.models.catalog import CourseCreate, CourseDetail, CoursePage, ModuleCreate
from sheetlms.models.entities import Course, Module

logger = logging.getLogger(__name__)

router = APIRouter()


class CategoryList(BaseModel):
    """Unique course categories."""

    categories: list[str] = Field(description="Categories in first-seen order")


@router.get(
    "",
    response_model=ApiResponse[CoursePage],
    summary="List courses",
)
async def list_courses(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Courses per page"),
    category: str | None = Query(None, description="Case-insensitive category filter"),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[CoursePage]:
    """List one page of courses with module counts."""
    result = await service.list_courses(page=page, limit=limit, category=category)
    return ApiResponse(data=result)


@router.get(
    "/categories",
    response_model=ApiResponse[CategoryList],
    summary="List categories",
)
async def list_categories(
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[CategoryList]:
    """List unique course categories."""
    categories = await service.list_categories()
    return ApiResponse(data=CategoryList(categories=categories))


@router.get(
    "/{course_id}",
    response_model=ApiResponse[CourseDetail],
    summary="Get course",
)
async def get_course(
    course_id: str,
    current_user: CurrentUser | None = Depends(get_optional_user),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[CourseDetail]:
    """Get a course with ordered modules and lessons.

    Authenticated callers also receive their progress rows.
    """
    detail = await service.get_course(
        course_id,
        user_id=current_user.id if current_user else None,
    )
    return ApiResponse(data=detail)


@router.post(
    "",
    response_model=ApiResponse[Course],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
)
async def create_course(
    data: CourseCreate,
    current_user: CurrentUser = Depends(require_instructor),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[Course]:
    """Create a course owned by the caller."""
    course = await service.create_course(data, instructor_id=current_user.id)
    return ApiResponse(data=course, message="Course created successfully")


@router.post(
    "/{course_id}/modules",
    response_model=ApiResponse[Module],
    status_code=status.HTTP_201_CREATED,
    summary="Add module",
)
async def add_module(
    course_id: str,
    data: ModuleCreate,
    current_user: CurrentUser = Depends(require_instructor),
    service: CatalogService = Depends(get_catalog_service),
) -> ApiResponse[Module]:
    """Add a module to a course."""
    module = await service.add_module(course_id, data)
    return ApiResponse(data=module, message="Module added successfully")
