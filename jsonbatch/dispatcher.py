"""Request dispatchers that turn built requests into responses."""

import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from .context import serialize
from .errors import DispatchError
from .models import Headers, Request, Response

logger = logging.getLogger(__name__)


class RequestDispatcher(ABC):
    """Abstract base class for request dispatchers.

    The batch engine hands every built request to ``dispatch`` and blocks
    until a response comes back.
    """

    @abstractmethod
    def dispatch(self, request: Request) -> Response:
        """Send a request and return its response.

        Raises:
            DispatchError: If no response could be obtained
        """
        pass


def normalize_headers(values: Optional[Dict[str, Union[str, List[str]]]]) -> Headers:
    """Turn a header mapping with str or list values into lists of strings."""
    headers: Headers = {}
    for key, value in (values or {}).items():
        if isinstance(value, (list, tuple)):
            headers[key] = [str(v) for v in value]
        else:
            headers[key] = [str(value)]
    return headers


class HttpxDispatcher(RequestDispatcher):
    """Dispatches requests over HTTP with a shared ``httpx.Client``.

    Bodies are sent as JSON; response bodies are decoded from JSON when the
    response says so and kept as text otherwise.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        default_headers: Optional[Dict[str, Union[str, List[str]]]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        client_args: Dict[str, Any] = {"timeout": timeout}
        if base_url:
            client_args["base_url"] = base_url
        if transport is not None:
            client_args["transport"] = transport
        self.client = httpx.Client(**client_args)
        self.default_headers = normalize_headers(default_headers)

    def __enter__(self) -> "HttpxDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    def dispatch(self, request: Request) -> Response:
        """Send a request over HTTP.

        Non-2xx statuses are returned as normal responses; only transport
        failures raise.

        Raises:
            DispatchError: On connection errors, timeouts or invalid URLs
        """
        headers = self._build_headers(request)
        content = None
        if request.body is not None:
            content = serialize(request.body)
            if not any(key.lower() == "content-type" for key, _ in headers):
                headers.append(("Content-Type", "application/json"))

        logger.debug("Dispatch %s %s", request.http_method, request.url)
        try:
            http_response = self.client.request(
                request.http_method,
                request.url,
                headers=headers,
                content=content,
            )
        except httpx.HTTPError as e:
            raise DispatchError(request.http_method, request.url, str(e)) from e

        return Response(
            status=http_response.status_code,
            headers=self._response_headers(http_response),
            body=self._decode_body(http_response),
        )

    def _build_headers(self, request: Request) -> List[Tuple[str, str]]:
        merged = dict(self.default_headers)
        merged.update(request.headers)
        return [(key, value) for key, values in merged.items() for value in values]

    def _response_headers(self, http_response: httpx.Response) -> Headers:
        headers: Headers = {}
        for key, value in http_response.headers.multi_items():
            headers.setdefault(key, []).append(value)
        return headers

    def _decode_body(self, http_response: httpx.Response) -> Any:
        if not http_response.content:
            return None
        content_type = http_response.headers.get("content-type", "")
        if "json" in content_type:
            try:
                return http_response.json(parse_float=Decimal)
            except json.JSONDecodeError:
                logger.debug("Response declared JSON but did not parse; keeping text")
        return http_response.text
