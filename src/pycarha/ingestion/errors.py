"""Error normalization for polling-status payloads.

Upstream failures arrive in several shapes: ``aiohttp`` response errors,
:class:`~pycarha.exceptions.CarTransportError`, exceptions carrying a
``response``/``request``/``config`` attribute (dict or object), or plain
exceptions whose message embeds ``got: <status> <text>``.  They are all
flattened into one JSON-serializable document so Home Assistant templates
such as ``{{ value_json.error.response.status | int(0) }}`` always find
the status where they expect it.
"""

from __future__ import annotations

import re
import traceback
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import aiohttp

from pycarha.exceptions import CarTransportError

_STATUS_IN_MESSAGE_RE = re.compile(r"got:\s*(\d{3})\s+(.*)", re.IGNORECASE)
_UNKNOWN_STATUS_TEXT = "Unknown"
_REQUEST_FIELDS = ("method", "url", "headers", "body", "contentType")

SUCCESS_MESSAGE = "Success"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _field(source: Any, *names: str) -> Any:
    """First non-None attribute or key of *source* among *names*."""
    if source is None:
        return None
    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _response_info(exc: BaseException, message: str) -> dict[str, Any] | None:
    if isinstance(exc, aiohttp.ClientResponseError):
        return {
            "status": exc.status,
            "statusText": exc.message or _UNKNOWN_STATUS_TEXT,
            "data": None,
            "headers": _jsonable(dict(exc.headers)) if exc.headers else None,
        }

    response = getattr(exc, "response", None)
    status = _field(response, "status", "status_code", "statusCode")
    status_text = _field(response, "statusText", "status_text", "statusMessage", "reason")
    data = _field(response, "data", "body")
    headers = _field(response, "headers")

    if status is None and isinstance(exc, CarTransportError):
        status = exc.status_code

    if status is None:
        match = _STATUS_IN_MESSAGE_RE.search(message)
        if match is None:
            return None
        status = int(match.group(1))
        status_text = status_text or match.group(2).strip()

    try:
        status = int(status)
    except (TypeError, ValueError):
        return None

    return {
        "status": status,
        "statusText": status_text or _UNKNOWN_STATUS_TEXT,
        "data": _jsonable(data),
        "headers": _jsonable(headers),
    }


def _request_info(exc: BaseException) -> dict[str, Any] | None:
    if isinstance(exc, aiohttp.ClientResponseError) and exc.request_info is not None:
        info = exc.request_info
        return {
            "method": info.method,
            "url": str(info.url),
            "headers": _jsonable(dict(info.headers)),
            "body": None,
            "contentType": None,
        }

    request: dict[str, Any] = {}
    # ``config`` describes the request as sent and wins over ``request``.
    for source in (getattr(exc, "request", None), getattr(exc, "config", None)):
        if source is None:
            continue
        for name in _REQUEST_FIELDS:
            value = _field(source, name)
            if value is not None:
                request[name] = _jsonable(value)

    if not request and isinstance(exc, CarTransportError) and exc.endpoint:
        request["url"] = exc.endpoint
    if not request:
        return None
    return {name: request.get(name) for name in _REQUEST_FIELDS}


def normalize_error(exc: BaseException) -> dict[str, Any]:
    """Flatten *exc* into ``{message, stack, response?, request?}``.

    ``response`` is present only when a status could be determined:
    ``response.status``, then ``status_code``/``statusCode``, then
    :attr:`CarTransportError.status_code`, then a ``got: <code> <text>``
    fragment of the message.
    """
    message = str(exc)
    result: dict[str, Any] = {"message": message, "stack": _format_stack(exc)}
    response = _response_info(exc, message)
    if response is not None:
        result["response"] = response
    request = _request_info(exc)
    if request is not None:
        result["request"] = request
    return result


def polling_status_payload(
    error: BaseException | None = None,
    *,
    clock: Callable[[], datetime] = _utcnow,
) -> dict[str, Any]:
    """State document for the polling-status sensors.

    A successful poll reports ``Success`` with status 200 so the status
    code template still resolves.
    """
    if error is None:
        error_doc: dict[str, Any] = {
            "message": SUCCESS_MESSAGE,
            "response": {"status": 200, "statusText": "OK", "data": None, "headers": None},
        }
    else:
        error_doc = normalize_error(error)
    return {"error": error_doc, "completionTimestamp": clock().isoformat()}
