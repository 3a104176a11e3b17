"""Shared test fixtures and configuration."""

from typing import Any, Dict, List
from unittest.mock import MagicMock

import pytest

from jsonbatch.builder import JsonBuilder
from jsonbatch.context import DocumentContext
from jsonbatch.dispatcher import RequestDispatcher
from jsonbatch.models import Response


@pytest.fixture
def builder() -> JsonBuilder:
    """Create a JsonBuilder with the default functions."""
    return JsonBuilder()


@pytest.fixture
def order() -> Dict[str, Any]:
    """A small order document used across builder tests."""
    return {
        "id": 42,
        "customer": {"name": "Ada", "last": "Lovelace", "vip": "true"},
        "items": [
            {"sku": "A-1", "qty": "2", "amount": "1.5"},
            {"sku": "B-2", "qty": 3, "amount": "2.5"},
        ],
        "tags": ["new", "gift"],
        "empty": [],
    }


@pytest.fixture
def order_context(order: Dict[str, Any]) -> DocumentContext:
    """Wrap the order document as a context."""
    return DocumentContext.of(order)


@pytest.fixture
def dispatcher() -> MagicMock:
    """Create a dispatcher mock returning queued responses.

    Extend ``dispatcher.queue`` with responses to return in order; sent
    requests are recorded in ``dispatcher.sent``. An empty queue answers
    200 with no body.
    """
    mock = MagicMock(spec=RequestDispatcher)
    sent: List[Any] = []
    responses: List[Response] = []

    def dispatch(request: Any) -> Response:
        sent.append(request)
        if responses:
            return responses.pop(0)
        return Response(status=200, headers={}, body=None)

    mock.dispatch.side_effect = dispatch
    mock.sent = sent
    mock.queue = responses
    return mock
