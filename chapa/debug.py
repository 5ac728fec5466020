"""
Sanitized debug printing.

Output is off unless ``CHAPA_DEBUG`` is set, :func:`set_debug` is called, or a
client is built from a ``ChapaConfig(debug=True)``. The last one only affects
that client's own :class:`DebugLog`; nothing process-wide is changed.
"""
from __future__ import annotations

import json
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

PREFIX = "[ChapaSDK]"

# max characters of a JSON dump before it is cut
MAX_JSON_CHARS = int(os.getenv("CHAPA_DEBUG_MAX_JSON", "50000"))

SENSITIVE_HEADER_KEYS = frozenset({"authorization", "x-api-key", "chapa-signature", "x-chapa-signature"})

_BEARER = re.compile(r"^bearer\s+(.+)$", re.I)
_OFF = ("", "0", "false", "no", "off")

_enabled = os.getenv("CHAPA_DEBUG", "0").strip().lower() not in _OFF


def is_enabled() -> bool:
    """Global switch, shared by every :class:`DebugLog` that is not forced on."""
    return _enabled


def set_debug(enabled: bool) -> None:
    global _enabled
    _enabled = bool(enabled)


# ----------------------------- redaction -----------------------------

def mask_key(val: Optional[str]) -> str:
    """Keep the CHASECK/CHAPUBK style prefix visible, hide the rest."""
    if not val:
        return "(empty)"
    head, sep, _rest = val.partition("-")
    if sep and len(head) <= 16:
        return f"{head}-***"
    return "***"


def redact_auth(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    m = _BEARER.match(value.strip())
    return f"Bearer {mask_key(m.group(1))}" if m else "***"


def scrub_headers(h: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``h`` safe to print: auth masked, signatures hidden."""
    out: Dict[str, str] = {}
    for k, v in (h or {}).items():
        lk = k.lower()
        if lk == "authorization":
            out[k] = redact_auth(v) or "***"
        elif lk in SENSITIVE_HEADER_KEYS:
            out[k] = "***"
        else:
            out[k] = v
    return out


# ----------------------------- printing -----------------------------

def _stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _dump(data: Any) -> str:
    try:
        text = json.dumps(data, ensure_ascii=False, indent=2, default=str)
    except (TypeError, ValueError):
        text = repr(data)
    if len(text) > MAX_JSON_CHARS:
        text = text[:MAX_JSON_CHARS] + "... (truncated)"
    return text


class DebugLog:
    """
    Callable printer. ``force=True`` prints even while the global switch is off.

        log = DebugLog(force=config.debug)
        log("HTTP send", {"url": url})
        log.json("body", payload)
    """

    def __init__(self, force: bool = False):
        self.force = bool(force)

    @property
    def enabled(self) -> bool:
        return self.force or _enabled

    def __call__(self, *args: Any) -> None:
        if self.enabled:
            print(PREFIX, _stamp(), *args, flush=True)

    def json(self, label: str, data: Any) -> None:
        if self.enabled:
            print(PREFIX, _stamp(), f"{label}:", _dump(data), flush=True)


_default = DebugLog()


def debug_log(force: Any = False) -> DebugLog:
    """Shared log when ``force`` is falsy, a forced one otherwise."""
    return DebugLog(force=True) if force else _default


def dprint(*args: Any) -> None:
    _default(*args)


def djson(label: str, data: Any) -> None:
    _default.json(label, data)
