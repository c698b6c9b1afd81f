# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- An in-memory tabular transport standing in for the Sheets API
- Row store, cache, repository and services wired on top of it
- Settings and JWT helpers for API tests
"""

import asyncio
import re
from collections.abc import Callable
from typing import Any

import pytest
from jose import jwt
from pydantic import SecretStr

from sheetlms.core.config.settings import (
    CacheSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    SheetsSettings,
)
from sheetlms.domains.catalog.service import CatalogService
from sheetlms.domains.progress.service import ProgressService
from sheetlms.domains.quiz.service import QuizService
from sheetlms.infrastructure.cache import ReadThroughCache
from sheetlms.infrastructure.sheets import RowStore, SheetRepository, describe_layout

TEST_JWT_SECRET = "test-secret-key-for-jwt-testing"

_ROW_RANGE = re.compile(r"^A(\d+):Z(\d+)$")


# =============================================================================
# In-memory transport
# =============================================================================


class InMemoryTransport:
    """Tabular transport keeping every sheet as a list of rows.

    Mirrors the Sheets API behaviour the row store relies on: reads return
    rows without trailing empty cells, appends go after the last row and
    updates replace the addressed row. Every call yields to the event loop
    so concurrent callers interleave as they would over the network.

    Attributes:
        sheets: Rows per sheet name, header first.
        calls: (method, range) for every call, in order.
        fail_with: Exception raised by the next calls when set.
    """

    def __init__(self) -> None:
        self.sheets: dict[str, list[list[str]]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    def seed(self, table: str, header: list[str], rows: list[list[str]] | None = None) -> None:
        """Replace a sheet with a header and data rows."""
        self.sheets[table] = [list(header)] + [list(row) for row in rows or []]

    def data_rows(self, table: str) -> list[list[str]]:
        """Data rows of a sheet, header excluded."""
        return self.sheets.get(table, [])[1:]

    async def _enter(self, method: str, range_: str) -> str:
        self.calls.append((method, range_))
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        table, _, _ = range_.partition("!")
        return table

    async def read_range(self, range_: str) -> list[list[str]]:
        table = await self._enter("read", range_)
        rows = []
        for row in self.sheets.get(table, []):
            trimmed = list(row)
            while trimmed and trimmed[-1] == "":
                trimmed.pop()
            rows.append(trimmed)
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def append_row(self, range_: str, values: list[str]) -> None:
        table = await self._enter("append", range_)
        self.sheets.setdefault(table, []).append(list(values))

    async def update_row(self, range_: str, values: list[str]) -> None:
        table = await self._enter("update", range_)
        _, _, cells = range_.partition("!")
        match = _ROW_RANGE.match(cells)
        if match is None:
            raise ValueError(f"Not a single-row range: {range_}")
        position = int(match.group(1))
        rows = self.sheets.setdefault(table, [])
        while len(rows) < position:
            rows.append([])
        rows[position - 1] = list(values)


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Storage fixtures
# =============================================================================


@pytest.fixture
def transport() -> InMemoryTransport:
    """Empty in-memory spreadsheet."""
    return InMemoryTransport()


@pytest.fixture
def layout_transport(transport: InMemoryTransport) -> InMemoryTransport:
    """In-memory spreadsheet with every entity sheet holding only its header."""
    for table, columns in describe_layout().items():
        transport.seed(table, columns)
    return transport


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ReadThroughCache:
    """Read-through cache on the fake clock."""
    return ReadThroughCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def store(layout_transport: InMemoryTransport) -> RowStore:
    """Row store over the initialized spreadsheet."""
    return RowStore(layout_transport)


@pytest.fixture
def repository(store: RowStore, cache: ReadThroughCache) -> SheetRepository:
    """Cached repository over the initialized spreadsheet."""
    return SheetRepository(store, cache)


@pytest.fixture
def progress_service(repository: SheetRepository) -> ProgressService:
    """Progress service over the repository."""
    return ProgressService(repository)


@pytest.fixture
def quiz_service(repository: SheetRepository, progress_service: ProgressService) -> QuizService:
    """Quiz service over the repository."""
    return QuizService(repository, progress_service)


@pytest.fixture
def catalog_service(repository: SheetRepository) -> CatalogService:
    """Catalog service over the repository."""
    return CatalogService(repository)


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def seeded_transport(layout_transport: InMemoryTransport) -> InMemoryTransport:
    """Spreadsheet with one course, two modules, three lessons and quizzes.

    C1 "Python Basics" (programming):
        M1 order 1: L1 (order 1, 4 questions), L2 (order 2, no questions)
        M2 order 2: L3 (order 1)
    C2 "Drawing" (Art): no modules.

    L1 answers are q1=b, q2=c, q3=a, q4=d.
    """
    t = layout_transport
    t.seed(
        "Courses",
        describe_layout()["Courses"],
        [
            ["C1", "Python Basics", "Learn Python", "programming", "", "I1", "2025-01-01T00:00:00+00:00"],
            ["C2", "Drawing", "Sketching", "Art", "", "I1", "2025-01-02T00:00:00+00:00"],
        ],
    )
    t.seed(
        "Modules",
        describe_layout()["Modules"],
        [
            ["M2", "C1", "Advanced", "2"],
            ["M1", "C1", "Intro", "1"],
        ],
    )
    t.seed(
        "Lessons",
        describe_layout()["Lessons"],
        [
            ["L2", "M1", "Variables", "https://youtu.be/2", "", "2"],
            ["L1", "M1", "Hello World", "https://youtu.be/1", "First steps", "1"],
            ["L3", "M2", "Classes", "https://youtu.be/3", "", "1"],
        ],
    )
    t.seed(
        "Quizzes",
        describe_layout()["Quizzes"],
        [
            ["q1", "L1", "2+2?", "3", "4", "5", "6", "b"],
            ["q2", "L1", "print?", "echo", "say", "print", "puts", "c"],
            ["q3", "L1", "def?", "def", "fn", "func", "lambda", "a"],
            ["q4", "L1", "None?", "nil", "null", "undefined", "None", "d"],
            ["q5", "L3", "class?", "class", "struct", "type", "obj", "a"],
        ],
    )
    return t


@pytest.fixture
def sample_answers() -> Callable[..., list[dict[str, str]]]:
    """Build answer payloads from letters for q1..q4."""

    def build(*letters: str) -> list[dict[str, str]]:
        return [
            {"quiz_id": f"q{index}", "selected_answer": letter}
            for index, letter in enumerate(letters, start=1)
        ]

    return build


# =============================================================================
# Settings and auth
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings for API tests; rate limiting off, credentials unset."""
    return Settings(
        environment="development",
        debug=True,
        log_level="DEBUG",
        sheets=SheetsSettings(spreadsheet_id=""),
        cache=CacheSettings(ttl_seconds=300),
        jwt=JWTSettings(secret_key=SecretStr(TEST_JWT_SECRET), algorithm="HS256"),
        rate_limit=RateLimitSettings(enabled=False),
    )


def make_token(user_id: str, role: str = "student", secret: str = TEST_JWT_SECRET, **claims: Any) -> str:
    """Encode a bearer token the way the external issuer does."""
    payload = {"sub": user_id, "role": role, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Encode bearer tokens signed with the test secret."""
    return make_token


@pytest.fixture
def auth_header() -> Callable[..., dict[str, str]]:
    """Build an Authorization header for a user and role."""

    def build(user_id: str, role: str = "student") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return build


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
