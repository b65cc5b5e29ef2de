"""Uniform JSON envelope for API responses."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Sequence

from flask import jsonify
from flask.json.provider import DefaultJSONProvider

SUCCESS_MESSAGE = "Operation completed successfully"
CREATED_MESSAGE = "Resource created successfully"

_MISSING = object()


class WealthLogJSONProvider(DefaultJSONProvider):
    """JSON provider that keeps key order and writes ISO-8601 dates."""

    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def envelope(
    data: Any = _MISSING,
    *,
    message: str = SUCCESS_MESSAGE,
    status_code: int = 200,
    meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return the ``{success, statusCode, message, timestamp, data?, meta?}`` body."""

    body: dict[str, Any] = {
        "success": 200 <= status_code < 300,
        "statusCode": status_code,
        "message": message,
        "timestamp": _timestamp(),
    }
    if data is not _MISSING and data is not None:
        body["data"] = data
    if meta:
        body["meta"] = meta
    return body


def success(data: Any = None, message: str = SUCCESS_MESSAGE, status_code: int = 200):
    return jsonify(envelope(data, message=message, status_code=status_code)), status_code


def created(data: Any = None, message: str = CREATED_MESSAGE):
    return success(data, message, 201)


def listing(items: Sequence[Any], message: str = SUCCESS_MESSAGE):
    """List response carrying the item count in ``meta``."""

    body = envelope(list(items), message=message, meta={"count": len(items)})
    return jsonify(body), 200


def pagination_meta(*, page: int, limit: int, total: int) -> dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def paginated(
    items: Sequence[Any], *, page: int, limit: int, total: int, message: str = SUCCESS_MESSAGE
):
    meta = {"pagination": pagination_meta(page=page, limit=limit, total=total)}
    body = envelope(list(items), message=message, meta=meta)
    return jsonify(body), 200
