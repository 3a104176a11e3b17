"""Configuration dataclasses and YAML/JSON loading for batch templates."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .builder import JsonBuilder
from .dispatcher import normalize_headers
from .errors import ConfigError
from .models import BatchTemplate, Request, RequestTemplate, ResponseTemplate
from .types import load_json

_REQUEST_KEYS = ("http_method", "method", "url", "headers", "body")
_RESPONSE_KEYS = ("status", "headers", "body")


@dataclass
class JsonBatchConfig:
    """Engine and dispatcher settings."""

    max_depth: int = JsonBuilder.DEFAULT_MAX_DEPTH
    timeout: float = 30.0  # Seconds per outbound request
    base_url: Optional[str] = None  # Prefix for relative request URLs
    default_headers: Dict[str, Any] = field(default_factory=dict)


def _read_file(path: Path) -> Any:
    """Read a YAML or JSON file.

    ``.json`` files are parsed with Decimal fractions so no digits are lost;
    anything else goes through the YAML loader.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found at:\n  {path}")
    with open(path, "r") as f:
        text = f.read()
    if path.suffix.lower() == ".json":
        try:
            return load_json(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", str(path)) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(path)) from e


def _setting(data: Dict[str, Any], key: str, convert: Any, default: Any, path: Path) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be a number, got {value!r}", str(path))
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be a number, got {value!r}", str(path)) from None


def load_config(path: Optional[Path] = None) -> JsonBatchConfig:
    """Load engine settings, or the defaults when no path is given.

    Raises:
        ConfigError: If the file is not a mapping or a setting has the wrong type
    """
    if path is None:
        return JsonBatchConfig()

    data = _read_file(path) or {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping", str(path))

    default_headers = data.get("default_headers") or {}
    if not isinstance(default_headers, dict):
        raise ConfigError("'default_headers' must be a mapping", str(path))

    base_url = data.get("base_url")
    if base_url is not None and not isinstance(base_url, str):
        raise ConfigError("'base_url' must be a string", str(path))

    return JsonBatchConfig(
        max_depth=_setting(data, "max_depth", int, JsonBuilder.DEFAULT_MAX_DEPTH, path),
        timeout=_setting(data, "timeout", float, 30.0, path),
        base_url=base_url,
        default_headers=default_headers,
    )


def _parse_request_template(data: Any, index: int, source: Optional[str]) -> RequestTemplate:
    if not isinstance(data, dict):
        raise ConfigError(f"Request {index + 1} must be a mapping", source)
    url = data.get("url")
    if not isinstance(url, str) or not url:
        raise ConfigError(f"Request {index + 1} requires a 'url' string", source)

    unknown = [key for key in data if key not in _REQUEST_KEYS]
    if unknown:
        raise ConfigError(
            f"Request {index + 1} has unknown fields: {', '.join(map(str, unknown))}",
            source,
        )

    return RequestTemplate(
        url=url,
        http_method=str(data.get("http_method", data.get("method", "GET"))).upper(),
        headers=data.get("headers"),
        body=data.get("body"),
    )


def _parse_response_template(data: Any, source: Optional[str]) -> ResponseTemplate:
    if not isinstance(data, dict):
        raise ConfigError("'response' must be a mapping", source)
    unknown = [key for key in data if key not in _RESPONSE_KEYS]
    if unknown:
        raise ConfigError(
            f"Response has unknown fields: {', '.join(map(str, unknown))}", source
        )
    return ResponseTemplate(
        status=data.get("status"),
        headers=data.get("headers"),
        body=data.get("body"),
    )


def parse_batch_template(data: Any, source: Optional[str] = None) -> BatchTemplate:
    """Parse a batch template mapping.

    Expected shape::

        requests:
          - http_method: GET
            url: "https://api.example.com/users/@{str $.original.body.user}@"
            headers:
              Accept: "str application/json"
        response:
          body:
            name: "str $.responses[0].body.name"

    Raises:
        ConfigError: If the mapping does not have that shape
    """
    if not isinstance(data, dict):
        raise ConfigError("Batch template must be a mapping", source)

    raw_requests = data.get("requests") or []
    if not isinstance(raw_requests, list):
        raise ConfigError("'requests' must be a list", source)

    requests: List[RequestTemplate] = [
        _parse_request_template(item, idx, source) for idx, item in enumerate(raw_requests)
    ]

    response = None
    if data.get("response") is not None:
        response = _parse_response_template(data["response"], source)

    return BatchTemplate(requests=requests, response=response)


def load_batch_template(path: Path) -> BatchTemplate:
    """Load a batch template from a YAML or JSON file."""
    return parse_batch_template(_read_file(path), str(path))


def load_document(path: Path) -> Any:
    """Load a JSON or YAML document to evaluate schemas against."""
    return _read_file(path)


def parse_request(data: Any, source: Optional[str] = None) -> Request:
    """Parse an original request mapping (http_method, url, headers, body)."""
    if data is None:
        return Request()
    if not isinstance(data, dict):
        raise ConfigError("Request must be a mapping", source)
    headers = data.get("headers") or {}
    if not isinstance(headers, dict):
        raise ConfigError("Request 'headers' must be a mapping", source)
    return Request(
        http_method=str(data.get("http_method", data.get("method", "GET"))).upper(),
        url=str(data.get("url", "")),
        headers=normalize_headers(headers),
        body=data.get("body"),
    )


def load_request(path: Path) -> Request:
    """Load the original request from a YAML or JSON file."""
    return parse_request(_read_file(path), str(path))


def validate_template_file(file_path: Path) -> tuple[bool, Optional[str]]:
    """Validate that a file holds a well-formed batch template.

    Returns:
        Tuple of (is_valid, error_message). If valid, error_message is None.
    """
    if not file_path.exists():
        return False, f"File not found: {file_path}"

    if not file_path.is_file():
        return False, f"Not a file: {file_path}"

    try:
        load_batch_template(file_path)
    except ConfigError as e:
        return False, str(e)

    return True, None
