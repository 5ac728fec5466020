from __future__ import annotations
import enum
import json
from typing import Any, Optional, Dict

from .debug import dprint


class ErrorKind(str, enum.Enum):
    """Tag shared by every SDK error so callers can branch on one attribute."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    DECODE = "decode"
    REMOTE = "remote"
    WEBHOOK = "webhook"


class ChapaError(Exception):
    """Base exception for all Chapa SDK errors."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ChapaValidationError(ChapaError, ValueError):
    """
    Raised for malformed or missing input, always before a request is sent.

    ``field`` names the offending option (dotted for nested values) when known.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class ChapaConfigError(ChapaValidationError):
    """Raised when configuration/credentials are invalid or missing."""
    pass


class ChapaWebhookError(ChapaError):
    """Raised for webhook signature/format errors."""

    kind = ErrorKind.WEBHOOK


class ChapaAPIError(ChapaError):
    """
    Common shape for everything that went wrong after a request was built.

    Attributes
    ----------
    status : int
        HTTP status code (or -1 when no response was received).
    message : Any
        The API ``message`` field kept verbatim (may be a string or a dict of
        field errors), or a transport/decoder description.
    raw_body : bytes
        Response body exactly as received (empty for transport failures).
    request_id : Optional[str]
        Server-provided correlation id, if available.
    method, url : Optional[str]
        Best-effort request line that triggered the error.
    """

    def __init__(
        self,
        status: int,
        message: Any,
        raw_body: bytes = b"",
        *,
        method: Optional[str] = None,
        url: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        self.status = int(status)
        self.message = message
        self.raw_body = raw_body
        self.method = method
        self.url = url
        self.request_id = request_id

        dprint(type(self).__name__, {
            "kind": self.kind.value,
            "status": self.status,
            "request_id": self.request_id,
            "method": self.method,
            "url": self.url,
        })

        super().__init__(self._message())

    # ---------------- convenience properties ----------------

    @property
    def retryable(self) -> bool:
        """Hint for callers that run their own retry policy."""
        return self.status in (429, 500, 502, 503, 504)

    @property
    def message_text(self) -> str:
        """Single-line, human friendly rendering of ``message``."""
        m = self.message
        if isinstance(m, str):
            return m.strip() or "error"
        if isinstance(m, dict):
            # Chapa validation failures look like {"amount": ["The amount field is required"]}
            parts = []
            for key, val in m.items():
                if isinstance(val, (list, tuple)):
                    val = "; ".join(str(v) for v in val)
                parts.append(f"{key}: {val}")
            if parts:
                return ", ".join(parts)
        if m is None:
            return "error"
        try:
            s = json.dumps(m, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(m)
        return s if len(s) <= 240 else s[:237] + "..."

    # ---------------- rendering & serialization ----------------

    def _message(self) -> str:
        rid = f" req_id={self.request_id}" if self.request_id else ""
        meth = f" {self.method}" if self.method else ""
        url = f" {self.url}" if self.url else ""
        return f"[{self.kind.value}] HTTP {self.status}{meth}{url}{rid}: {self.message_text}"

    def __str__(self) -> str:
        return self._message()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message_text!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Sanitized summary for logs/telemetry; includes only non-sensitive fields."""
        return {
            "kind": self.kind.value,
            "status": self.status,
            "request_id": self.request_id,
            "method": self.method,
            "url": self.url,
            "message": self.message_text,
            "retryable": self.retryable,
        }


class ChapaTransportError(ChapaAPIError):
    """The HTTP exchange itself failed (DNS, connect, timeout, protocol)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: Any, **kwargs: Any):
        super().__init__(-1, message, b"", **kwargs)

    @property
    def retryable(self) -> bool:
        return True


class ChapaDecodeError(ChapaAPIError):
    """The response body did not match the expected envelope or result shape."""

    kind = ErrorKind.DECODE


class ChapaRemoteError(ChapaAPIError):
    """The API answered with ``status != "success"`` (or a non-2xx code)."""

    kind = ErrorKind.REMOTE


__all__ = [
    "ErrorKind",
    "ChapaError",
    "ChapaValidationError",
    "ChapaConfigError",
    "ChapaWebhookError",
    "ChapaAPIError",
    "ChapaTransportError",
    "ChapaDecodeError",
    "ChapaRemoteError",
]
