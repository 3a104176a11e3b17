"""Batch engine that runs request templates in order."""

import logging
import time
from typing import Any, Dict, List, Optional

from .builder import JsonBuilder
from .context import DocumentContext, serialize
from .dispatcher import RequestDispatcher
from .errors import SchemaError
from .models import (
    BatchTemplate,
    Headers,
    Request,
    RequestTemplate,
    Response,
    ResponseTemplate,
)
from .types import Type, cast, to_text

logger = logging.getLogger(__name__)

KEY_ORIGINAL = "original"
KEY_REQUESTS = "requests"
KEY_RESPONSES = "responses"


class BatchListener:
    """Receives progress callbacks from ``BatchEngine.execute``.

    All methods are no-ops; override the ones you need.
    """

    def on_request(self, index: int, total: int, request: Request) -> None:
        """Called after a request is built, before it is dispatched."""
        pass

    def on_response(
        self, index: int, total: int, response: Response, duration: float
    ) -> None:
        """Called after the dispatcher returns a response."""
        pass


def build_headers(values: Any) -> Headers:
    """Normalize built header values to lists of strings.

    Raises:
        SchemaError: If the headers schema did not build an object
    """
    if not isinstance(values, dict):
        raise SchemaError(
            f"Headers schema must build an object, got {type(values).__name__}"
        )
    headers: Headers = {}
    for key, value in values.items():
        if isinstance(value, list):
            headers[key] = [to_text(item) for item in value]
        else:
            headers[key] = [to_text(value)]
    return headers


class BatchEngine:
    """Executes batch templates against a dispatcher.

    Every step is built from a context holding the original request and
    all previous requests and responses::

        {"original": {...}, "requests": [...], "responses": [...]}

    so a step can refer to ``$.responses[0].body.id``. Steps run strictly
    one after another.
    """

    def __init__(
        self,
        builder: JsonBuilder,
        dispatcher: RequestDispatcher,
        listener: Optional[BatchListener] = None,
    ) -> None:
        self.builder = builder
        self.dispatcher = dispatcher
        self.listener = listener or BatchListener()

    def execute(self, original_request: Request, template: BatchTemplate) -> Response:
        """Run every request template, then build the final response.

        Args:
            original_request: The request that started the batch
            template: Request templates and optional response template

        Returns:
            The response built from ``template.response``, or when there is
            none, a response whose body is the whole batch state

        Raises:
            JsonBatchError: Any schema, evaluation or dispatch failure; the
                batch stops at the failing step
        """
        state: Dict[str, Any] = {
            KEY_ORIGINAL: original_request.to_dict(),
            KEY_REQUESTS: [],
            KEY_RESPONSES: [],
        }
        context = DocumentContext.parse(serialize(state))
        requests: List[Dict[str, Any]] = state[KEY_REQUESTS]
        responses: List[Dict[str, Any]] = state[KEY_RESPONSES]

        total = len(template.requests)
        for index, request_template in enumerate(template.requests):
            request = self.build_request(request_template, context)
            logger.debug(
                "Step %d/%d: %s %s", index + 1, total, request.http_method, request.url
            )
            self.listener.on_request(index, total, request)

            start_time = time.time()
            response = self.dispatcher.dispatch(request)
            self.listener.on_response(index, total, response, time.time() - start_time)

            requests.append(request.to_dict())
            responses.append(response.to_dict())
            context = DocumentContext.parse(serialize(state))

        if template.response is not None:
            return self.build_response(template.response, context)

        return Response(body=state)

    def build_request(self, template: RequestTemplate, context: DocumentContext) -> Request:
        """Build one outbound request from its template."""
        request = Request(http_method=template.http_method)
        request.url = self.builder.build("str " + template.url, context)
        if template.body is not None:
            request.body = self.builder.build(template.body, context)
        if template.headers is not None:
            request.headers = build_headers(self.builder.build(template.headers, context))
        return request

    def build_response(
        self, template: ResponseTemplate, context: DocumentContext
    ) -> Response:
        """Build the final response from its template."""
        response = Response()
        if template.status is not None:
            status = self.builder.build(template.status, context)
            response.status = None if status is None else cast(status, Type.INTEGER)
        if template.body is not None:
            response.body = self.builder.build(template.body, context)
        if template.headers is not None:
            response.headers = build_headers(self.builder.build(template.headers, context))
        return response
