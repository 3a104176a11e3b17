"""Request, response and template dataclasses for batch execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Headers = Dict[str, List[str]]


@dataclass
class Request:
    """An outbound request built from a template (or the one that started the batch)."""

    http_method: str = "GET"
    url: str = ""
    headers: Headers = field(default_factory=dict)
    body: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Shape exposed to JSONPath as ``$.original`` / ``$.requests[i]``."""
        return {
            "http_method": self.http_method,
            "url": self.url,
            "headers": self.headers,
            "body": self.body,
        }


@dataclass
class Response:
    """A response returned by the dispatcher, or the final batch result.

    ``headers`` is None when the response carries no headers at all.
    """

    status: Optional[int] = None
    headers: Optional[Headers] = None
    body: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Shape exposed to JSONPath as ``$.responses[i]``."""
        return {
            "status": self.status,
            "headers": self.headers,
            "body": self.body,
        }


@dataclass
class RequestTemplate:
    """Template for one batch step.

    Attributes:
        http_method: HTTP method sent as-is
        url: URL text, may contain @{...}@ spans
        headers: Schema building a header mapping, or None for no headers
        body: Schema building the request body, or None for no body
    """

    url: str
    http_method: str = "GET"
    headers: Any = None
    body: Any = None


@dataclass
class ResponseTemplate:
    """Template for the final batch response.

    Each field is a schema; an absent field stays None in the result.
    """

    status: Any = None
    headers: Any = None
    body: Any = None


@dataclass
class BatchTemplate:
    """Ordered request templates plus an optional final response template."""

    requests: List[RequestTemplate] = field(default_factory=list)
    response: Optional[ResponseTemplate] = None
