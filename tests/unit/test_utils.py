# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for rounding, datetime, lock and logging utilities."""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from sheetlms.core.config.settings import Settings
from sheetlms.utils.datetime import ensure_utc, format_iso, parse_iso
from sheetlms.utils.locks import KeyedLock
from sheetlms.utils.logging import HANDLER_NAME, bind_context, clear_context, get_logger, setup_logging
from sheetlms.utils.rounding import percentage, round_half_up


class TestRounding:
    """Tests for round-half-up helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(62.5, 63), (0.5, 1), (2.5, 3), (74.4, 74), (0, 0)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        """Test halves round up, unlike built-in round()."""
        assert round_half_up(value) == expected

    def test_percentage(self) -> None:
        """Test percentages of a whole."""
        assert percentage(3, 4) == 75
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(5, 8) == 63

    def test_percentage_of_nothing(self) -> None:
        """Test an empty whole yields 0."""
        assert percentage(0, 0) == 0


class TestDatetime:
    """Tests for datetime helpers."""

    def test_parse_iso_with_z(self) -> None:
        """Test Z suffix parses as UTC."""
        assert parse_iso("2025-01-01T12:00:00Z") == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

    def test_parse_iso_empty(self) -> None:
        """Test empty input parses as None."""
        assert parse_iso("") is None

    def test_parse_iso_invalid(self) -> None:
        """Test garbage raises ValueError."""
        with pytest.raises(ValueError):
            parse_iso("yesterday")

    def test_ensure_utc_converts_offsets(self) -> None:
        """Test aware datetimes convert to UTC and naive ones are assumed UTC."""
        plus_two = datetime(2025, 1, 1, 14, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(plus_two) == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
        assert ensure_utc(datetime(2025, 1, 1)).tzinfo == timezone.utc

    def test_format_iso(self) -> None:
        """Test ISO formatting in UTC."""
        assert format_iso(datetime(2025, 1, 1, tzinfo=timezone.utc)) == "2025-01-01T00:00:00+00:00"
        assert format_iso(None) is None


class TestKeyedLock:
    """Tests for KeyedLock."""

    @pytest.mark.asyncio
    async def test_same_key_serializes(self) -> None:
        """Test work on one key never overlaps."""
        locks = KeyedLock()
        active = 0
        peak = 0

        async def work() -> None:
            nonlocal active, peak
            async with locks.acquire("k"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0)
                active -= 1

        await asyncio.gather(*(work() for _ in range(5)))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_different_keys_overlap(self) -> None:
        """Test unrelated keys do not block each other."""
        locks = KeyedLock()
        inside = asyncio.Event()

        async def holder() -> None:
            async with locks.acquire("a"):
                await asyncio.wait_for(inside.wait(), timeout=1)

        async def other() -> None:
            async with locks.acquire("b"):
                inside.set()

        await asyncio.gather(holder(), other())

        assert inside.is_set()

    @pytest.mark.asyncio
    async def test_locks_released(self) -> None:
        """Test idle keys are forgotten."""
        locks = KeyedLock()

        async with locks.acquire(("U1", "L1")):
            assert len(locks) == 1

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_released_on_error(self) -> None:
        """Test the lock is released when the body raises."""
        locks = KeyedLock()

        with pytest.raises(RuntimeError):
            async with locks.acquire("k"):
                raise RuntimeError("boom")

        assert len(locks) == 0


@pytest.fixture
def json_logging(capsys):
    """JSON logging to the captured stdout, undone after the test."""
    setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))
    yield capsys
    clear_context()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    structlog.reset_defaults()


def _last_line(capsys) -> dict:
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


class TestLogging:
    """Tests for logging setup and request context."""

    def test_stdlib_lines_carry_bound_context(self, json_logging) -> None:
        """Test values bound with bind_context appear on standard library log lines."""
        bind_context(path="/api/progress/U1", user_id="U1")

        logging.getLogger("sheetlms.test").info("hello %s", "world")

        line = _last_line(json_logging)
        assert line["event"] == "hello world"
        assert line["path"] == "/api/progress/U1"
        assert line["user_id"] == "U1"
        assert line["level"] == "info"
        assert line["logger"] == "sheetlms.test"

    def test_structlog_lines_carry_bound_context(self, json_logging) -> None:
        """Test structlog loggers share the context and keyword fields."""
        bind_context(user_id="U2")

        get_logger("sheetlms.test").info("Quiz submitted", lesson_id="L1", score=75)

        line = _last_line(json_logging)
        assert line["event"] == "Quiz submitted"
        assert line["user_id"] == "U2"
        assert line["score"] == 75

    def test_cleared_context_is_not_logged(self, json_logging) -> None:
        """Test clear_context drops earlier bindings."""
        bind_context(user_id="U1")
        clear_context()

        logging.getLogger("sheetlms.test").warning("after clear")

        assert "user_id" not in _last_line(json_logging)

    def test_repeated_setup_keeps_one_handler(self, json_logging) -> None:
        """Test setup_logging replaces its own root handler."""
        setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))

        names = [handler.get_name() for handler in logging.getLogger().handlers]
        assert names.count(HANDLER_NAME) == 1
