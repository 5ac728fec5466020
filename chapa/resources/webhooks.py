# chapa/resources/webhooks.py
from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..debug import djson, dprint
from ..errors import ChapaWebhookError


# ------------------------
# Models
# ------------------------

class WebhookEvent(BaseModel):
    """
    Chapa webhook payload (best-effort typed).
    Kept permissive so new fields won't break you; the whole payload stays in ``data``.
    """
    event: Optional[str] = None          # e.g. "charge.success", "payout.success"
    type: Optional[str] = None           # "API", "Payout", ...
    status: Optional[str] = None
    tx_ref: Optional[str] = None
    reference: Optional[str] = None
    amount: Optional[str] = None
    currency: Optional[str] = None
    mode: Optional[str] = None
    created_at: Optional[str] = None

    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ------------------------
# Signature verification
# ------------------------

# x-chapa-signature: HMAC-SHA256(secret, raw body)
BODY_SIGNATURE_HEADER = "x-chapa-signature"
# chapa-signature:   HMAC-SHA256(secret, secret)
SECRET_SIGNATURE_HEADER = "chapa-signature"

def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for k, v in headers.items():
        if k.lower() == name.lower():
            return v
    return None

def _as_bytes(value: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return value.encode("utf-8")

def _cmp(a: str, b: str) -> bool:
    return hmac.compare_digest(a.strip().lower().encode("ascii", "replace"), b.strip().lower().encode("ascii", "replace"))

def _hmac_hex(secret: Union[str, bytes], payload: Union[str, bytes]) -> str:
    return hmac.new(_as_bytes(secret), _as_bytes(payload), hashlib.sha256).hexdigest()

def sign_body(body: Union[str, bytes, bytearray], secret: Union[str, bytes]) -> str:
    """Expected ``x-chapa-signature`` for ``body`` (handy for tests and local replays)."""
    return _hmac_hex(secret, body)

def sign_secret(secret: Union[str, bytes]) -> str:
    """Expected ``chapa-signature`` value: the secret signed with itself."""
    return _hmac_hex(secret, secret)

def verify_signature(
    *,
    payload: Union[str, bytes, bytearray],
    headers: Mapping[str, str],
    secret: Optional[Union[str, bytes]],
    skip_verification: bool = False,
) -> Dict[str, Any]:
    """
    Verify a Chapa webhook signature.

    ``x-chapa-signature`` (body HMAC) is preferred when present; otherwise
    ``chapa-signature`` (secret HMAC) is checked. Comparisons are constant-time.

    Returns a details dict naming the header that matched.
    Raises ChapaWebhookError on failure (unless skip_verification=True).
    """
    dprint("webhooks.verify_signature() start", {"skip_verification": skip_verification})

    if skip_verification:
        dprint("webhooks.verify_signature() skipped (dev mode)")
        return {"skipped": True}

    if not secret:
        raise ChapaWebhookError("webhook secret missing")

    body_sig = _get_header(headers, BODY_SIGNATURE_HEADER)
    if body_sig:
        ok = _cmp(_hmac_hex(secret, payload), body_sig)
        found = BODY_SIGNATURE_HEADER
    else:
        secret_sig = _get_header(headers, SECRET_SIGNATURE_HEADER)
        if not secret_sig:
            raise ChapaWebhookError("no Chapa signature header found")
        ok = _cmp(_hmac_hex(secret, secret), secret_sig)
        found = SECRET_SIGNATURE_HEADER

    dprint("webhooks.verify_signature() result", {"ok": ok, "header": found})
    if not ok:
        raise ChapaWebhookError(f"signature verification failed: {found} mismatch")

    return {"ok": True, "header": found, "reason": "verified"}


# ------------------------
# Parsing & dispatch
# ------------------------

def _lift(payload: Mapping[str, Any], key: str) -> Optional[str]:
    v = payload.get(key)
    return None if v is None else str(v)

def parse_event(body: Union[str, bytes, bytearray]) -> WebhookEvent:
    """
    Decode a webhook body into a :class:`WebhookEvent`. No signature check;
    see :func:`verify_and_parse`.
    """
    raw_text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    try:
        payload = json.loads(raw_text) if raw_text else {}
    except ValueError as e:
        raise ChapaWebhookError(f"invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise ChapaWebhookError("webhook body must be a JSON object")

    djson("webhooks.parse_event() payload", payload)

    ev = WebhookEvent(
        event=_lift(payload, "event"),
        type=_lift(payload, "type"),
        status=_lift(payload, "status"),
        tx_ref=_lift(payload, "tx_ref"),
        reference=_lift(payload, "reference"),
        amount=_lift(payload, "amount"),
        currency=_lift(payload, "currency"),
        mode=_lift(payload, "mode"),
        created_at=_lift(payload, "created_at"),
        data=payload,
    )
    dprint("webhooks.parse_event() event", {"event": ev.event, "tx_ref": ev.tx_ref})
    return ev


def verify_and_parse(
    *,
    body: Union[str, bytes, bytearray],
    headers: Mapping[str, str],
    secret: Optional[Union[str, bytes]] = None,
    skip_verification: bool = False,
) -> Tuple[Dict[str, Any], WebhookEvent]:
    """
    Convenience: verify_signature(...) + parse_event(...)

    Returns:
      (verify_info_dict, WebhookEvent)
    """
    info = verify_signature(payload=body, headers=headers, secret=secret, skip_verification=skip_verification)
    return info, parse_event(body)


# ------------------------
# Tiny event router
# ------------------------

Handler = Callable[[WebhookEvent], Any]

class WebhookRouter:
    """
    Minimal event router:
        router = WebhookRouter()
        @router.on("charge.success")
        def _h(e): ...
        # wildcard handler:
        @router.on("*")
        def _all(e): ...

        info, event = verify_and_parse(body=..., headers=..., secret=...)
        results = router.dispatch(event)

    Handler exceptions propagate to the caller.
    """
    def __init__(self) -> None:
        self._map: Dict[str, List[Handler]] = {}

    def on(self, event_name: str) -> Callable[[Handler], Handler]:
        if not event_name or not isinstance(event_name, str):
            raise ValueError("event_name must be a non-empty string (or '*').")

        def _decorator(func: Handler) -> Handler:
            self.add(event_name, func)
            return func

        return _decorator

    def add(self, event_name: str, func: Handler) -> None:
        self._map.setdefault(event_name, []).append(func)
        dprint("webhooks.router.add()", {"event": event_name, "handler": getattr(func, "__name__", "handler")})

    def handlers_for(self, event_name: Optional[str]) -> Iterable[Handler]:
        if not event_name:
            # no name => only wildcard
            return list(self._map.get("*", []))
        return [*self._map.get(event_name, []), *self._map.get("*", [])]

    def dispatch(self, event: WebhookEvent) -> List[Any]:
        dprint("webhooks.router.dispatch()", {"event": event.event})
        return [fn(event) for fn in self.handlers_for(event.event)]


__all__ = [
    "BODY_SIGNATURE_HEADER",
    "SECRET_SIGNATURE_HEADER",
    "WebhookEvent",
    "WebhookRouter",
    "parse_event",
    "sign_body",
    "sign_secret",
    "verify_signature",
    "verify_and_parse",
]
