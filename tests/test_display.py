"""Unit tests for display module.

Output goes to a Console writing into a StringIO so the rendered text can be
checked without a terminal.
"""

import io
import json
from decimal import Decimal

import pytest
from rich.console import Console

from jsonbatch.display import (
    ConsoleListener,
    StatusIcons,
    _format_duration,
    _status_icon,
    print_error,
    print_json,
    print_response,
)
from jsonbatch.models import Request, Response


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def output(buffer: io.StringIO) -> Console:
    """Create a plain-text console writing to the buffer."""
    return Console(file=buffer, width=200, color_system=None, highlight=False)


class TestFormatDuration:
    """Tests for _format_duration."""

    @pytest.mark.parametrize(
        "seconds,expected",
        [(0.25, "250ms"), (1.5, "1.5s"), (59.94, "59.9s"), (125, "2m 05s")],
    )
    def test_format(self, seconds: float, expected: str) -> None:
        assert _format_duration(seconds) == expected


class TestStatusIcon:
    """Tests for _status_icon."""

    def test_success(self) -> None:
        assert _status_icon(200) == StatusIcons.SUCCESS
        assert _status_icon(None) == StatusIcons.SUCCESS

    def test_failure(self) -> None:
        assert _status_icon(404) == StatusIcons.FAILED
        assert _status_icon(503) == StatusIcons.FAILED


class TestConsoleListener:
    """Tests for step progress output."""

    def test_request_line(self, output: Console, buffer: io.StringIO) -> None:
        listener = ConsoleListener(output)
        listener.on_request(0, 2, Request(http_method="POST", url="http://api/users"))
        text = buffer.getvalue()
        assert "[1/2]" in text
        assert "POST http://api/users" in text

    def test_response_line(self, output: Console, buffer: io.StringIO) -> None:
        listener = ConsoleListener(output)
        listener.on_request(1, 2, Request(url="http://api/users/42"))
        listener.on_response(1, 2, Response(status=404), 0.12)
        last_line = buffer.getvalue().strip().splitlines()[-1]
        assert "✗" in last_line
        assert "GET http://api/users/42" in last_line
        assert "→ 404 (120ms)" in last_line

    def test_url_markup_is_escaped(self, output: Console, buffer: io.StringIO) -> None:
        listener = ConsoleListener(output)
        listener.on_request(0, 1, Request(url="http://api/[bold]x"))
        assert "http://api/[bold]x" in buffer.getvalue()


class TestPrintFunctions:
    """Tests for print_json, print_response and print_error."""

    def test_print_json_writes_decimals(self, output: Console, buffer: io.StringIO) -> None:
        print_json({"total": Decimal("4.0"), "n": Decimal("2")}, output)
        assert json.loads(buffer.getvalue()) == {"total": 4.0, "n": 2}

    def test_print_response(self, output: Console, buffer: io.StringIO) -> None:
        print_response(
            Response(status=201, headers={"X-Ids": ["1", "2"]}, body={"id": 5}), output
        )
        text = buffer.getvalue()
        assert "Status: 201" in text
        assert "X-Ids: 1, 2" in text
        assert json.loads(text[text.index("{"):]) == {"id": 5}

    def test_print_response_without_status(
        self, output: Console, buffer: io.StringIO
    ) -> None:
        print_response(Response(body=[1]), output)
        assert "Status" not in buffer.getvalue()

    def test_print_error(self, output: Console, buffer: io.StringIO) -> None:
        print_error("bad [thing]", output)
        assert "Error: bad [thing]" in buffer.getvalue()
