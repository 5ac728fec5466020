"""
Response mapper: raw status + bytes -> typed ``ChapaResponse`` or a classified error.

The mapper is a pure function of its inputs; transport failures are
classified by the client before it gets here.
"""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from .debug import DebugLog, debug_log
from .endpoints import Endpoint
from .errors import ChapaDecodeError, ChapaRemoteError
from .models import ChapaResponse

SUCCESS = "success"


@lru_cache(maxsize=None)
def _adapter(result: Any) -> TypeAdapter:
    return TypeAdapter(ChapaResponse[result])


def _is_2xx(status_code: int) -> bool:
    return 200 <= status_code < 300


def parse_body(content: bytes, **ctx: Any) -> Dict[str, Any]:
    """Decode a JSON object or raise ChapaDecodeError carrying the untouched bytes."""
    try:
        body = json.loads(content)
    except (UnicodeDecodeError, ValueError) as e:
        raise ChapaDecodeError(ctx.pop("status", -1), f"response is not JSON: {e}", content, **ctx) from e
    if not isinstance(body, dict):
        raise ChapaDecodeError(
            ctx.pop("status", -1), f"expected a JSON object, got {type(body).__name__}", content, **ctx
        )
    return body


def map_response(
    endpoint: Endpoint,
    status_code: int,
    content: bytes,
    *,
    method: Optional[str] = None,
    url: Optional[str] = None,
    request_id: Optional[str] = None,
    log: Optional[DebugLog] = None,
) -> ChapaResponse:
    """
    Classify and decode one HTTP answer for ``endpoint``.

    - non-JSON / non-object body            -> ChapaDecodeError
    - envelope status present, not success  -> ChapaRemoteError (even with HTTP 200)
    - envelope status absent                -> success only for 2xx
    - success status but non-2xx code       -> ChapaRemoteError
    - data does not fit the result type     -> ChapaDecodeError
    """
    ctx = {"method": method, "url": url, "request_id": request_id}
    body = parse_body(content, status=status_code, **ctx)
    log = log or debug_log()
    log.json(f"{endpoint.name} response", body)

    raw_status = body.get("status")
    message = body.get("message")
    status = raw_status.strip().lower() if isinstance(raw_status, str) else None

    if status is not None and status != SUCCESS:
        raise ChapaRemoteError(status_code, message, content, **ctx)
    if raw_status is not None and status is None:
        raise ChapaDecodeError(status_code, f"unexpected envelope status {raw_status!r}", content, **ctx)
    if not _is_2xx(status_code):
        raise ChapaRemoteError(status_code, message, content, **ctx)

    if endpoint.envelope:
        data = body.get("data")
        meta = body.get("meta")
    else:
        # payload is the whole body (e.g. /validate)
        data = body
        meta = None
    if meta is not None and not isinstance(meta, dict):
        meta = {"value": meta}

    try:
        result = _adapter(endpoint.result).validate_python(
            {"status": SUCCESS, "message": message, "data": data, "meta": meta}
        )
    except ValidationError as e:
        log("response.map_response() shape mismatch", {"endpoint": endpoint.name, "errors": e.error_count()})
        raise ChapaDecodeError(
            status_code,
            f"{endpoint.name} response did not match {getattr(endpoint.result, '__name__', endpoint.result)}: "
            f"{e.errors()[0].get('msg')} at {'.'.join(str(p) for p in e.errors()[0].get('loc', ()))}",
            content,
            **ctx,
        ) from e
    return result


__all__ = ["map_response", "parse_body", "SUCCESS"]
