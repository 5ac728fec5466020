"""
Request builder: options -> validated model -> encoded body + headers + path.

Nothing here touches the network, so every failure is a
:class:`~chapa.errors.ChapaValidationError` raised before a call is attempted.
"""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import parse_qsl, quote, urlencode

from pydantic import BaseModel, ValidationError

from .config import ChapaConfig
from .debug import debug_log, dprint, scrub_headers
from .endpoints import Endpoint
from .errors import ChapaValidationError

try:
    # __version__ is defined in chapa/__init__.py
    from . import __version__ as SDK_VERSION  # type: ignore
except ImportError:
    SDK_VERSION = "0.0.0"


CONTENT_TYPES = {
    "json": "application/json",
    "form": "application/x-www-form-urlencoded",
}

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class PreparedRequest:
    """Everything the transport needs; ``path`` is relative to ``config.api_url``."""
    endpoint: Endpoint
    method: str
    path: str
    headers: Dict[str, str]
    params: Dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None

    def decoded_body(self) -> Any:
        """Decode ``content`` back per the endpoint's encoding (handy in logs and tests)."""
        if self.content is None:
            return None
        text = self.content.decode("utf-8")
        if self.endpoint.encoding == "json":
            return json.loads(text)
        return dict(parse_qsl(text, keep_blank_values=True))


# ----------------------------- validation -----------------------------

def _describe(exc: ValidationError) -> Tuple[str, Optional[str]]:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
    msg = err.get("msg", "invalid value")
    return (f"{loc}: {msg}" if loc else msg), (loc or None)


def coerce_options(model: Type[M], value: Union[M, Mapping[str, Any], None]) -> M:
    """
    Accept either a ready model or a plain mapping and return a validated model.
    """
    if isinstance(value, model):
        return value
    if value is None:
        raise ChapaValidationError(f"{model.__name__} is required")
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(value, Mapping):
        raise ChapaValidationError(
            f"expected {model.__name__} or a mapping, got {type(value).__name__}"
        )
    try:
        return model.model_validate(dict(value))
    except ValidationError as e:
        message, loc = _describe(e)
        dprint("request.coerce_options() rejected", {"model": model.__name__, "field": loc})
        raise ChapaValidationError(f"{model.__name__} invalid, {message}", field=loc) from e


def _aliased(model: Optional[Type[BaseModel]], data: Mapping[str, Any]) -> Dict[str, Any]:
    if model is None:
        return dict(data)
    out: Dict[str, Any] = {}
    for key, value in data.items():
        info = model.model_fields.get(key)
        out[info.alias if info is not None and info.alias else key] = value
    return out


def merge_options(options: Any, fields: Mapping[str, Any], model: Optional[Type[BaseModel]] = None) -> Any:
    """
    Combine an options object (model or mapping) with keyword overrides.

    Returns ``options`` untouched when there are no keyword fields. Keys are
    written under the field alias of ``model`` (or of the options model), so
    ``from_currency=...`` overrides a ``"from"`` entry instead of adding one.
    """
    if not fields:
        return options
    if isinstance(options, BaseModel):
        model = model or type(options)
        options = options.model_dump(by_alias=True, exclude_none=True)
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise ChapaValidationError(f"options must be a model or a mapping, got {type(options).__name__}")
    return {**_aliased(model, options), **_aliased(model, fields)}


def optional_positive_int(name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ChapaValidationError(f"{name} must be a positive integer.", field=name)


def require_str(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ChapaValidationError(f"{name} is required and must be a non-empty string.", field=name)
    return value.strip()


# ----------------------------- encoding -----------------------------

def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


def flatten_form(data: Mapping[str, Any], prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flatten nested mappings/lists into bracketed form keys::

        {"customization": {"title": "x"}} -> [("customization[title]", "x")]
        {"subaccounts": [{"id": "a"}]}    -> [("subaccounts[0][id]", "a")]
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(flatten_form(value, name))
        elif isinstance(value, (list, tuple)):
            pairs.extend(flatten_form({str(i): v for i, v in enumerate(value)}, name))
        else:
            pairs.append((name, _scalar(value)))
    return pairs


def encode_body(encoding: str, payload: Mapping[str, Any]) -> bytes:
    if encoding == "json":
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    if encoding == "form":
        return urlencode(flatten_form(payload)).encode("ascii")
    raise ValueError(f"unsupported encoding {encoding!r}")


# ----------------------------- path & headers -----------------------------

def render_path(endpoint: Endpoint, path_params: Optional[Mapping[str, Any]]) -> str:
    path_params = dict(path_params or {})
    values: Dict[str, str] = {}
    for name in endpoint.path_params:
        raw = path_params.get(name)
        value = "" if raw is None else str(raw).strip()
        if not value:
            raise ChapaValidationError(f"{name} is required and must be a non-empty string.", field=name)
        if "/" in value:
            raise ChapaValidationError(f"{name} must not contain '/'", field=name)
        if value.strip(".") == "":
            raise ChapaValidationError(f"{name} must not be a dot segment", field=name)
        # ?, # and % would otherwise change the request target
        values[name] = quote(value, safe="")
    return endpoint.path.format(**values)


def build_headers(config: ChapaConfig, *, content_type: Optional[str] = None) -> Dict[str, str]:
    h: Dict[str, str] = {
        "Authorization": f"Bearer {config.secret_key}",
        "Accept": "application/json",
        "User-Agent": f"chapa-python/{SDK_VERSION}",
    }
    if content_type:
        h["Content-Type"] = content_type
    for k, v in config.default_headers.items():
        # auth is owned by the SDK
        if k.lower() != "authorization":
            h[k] = v
    return h


# ----------------------------- entry point -----------------------------

def build_request(
    config: ChapaConfig,
    endpoint: Endpoint,
    options: Any = None,
    *,
    path_params: Optional[Mapping[str, Any]] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> PreparedRequest:
    """
    Turn endpoint + options into a :class:`PreparedRequest`.

    Raises ChapaValidationError for missing credentials, options, or path
    parameters. The secret key only ever appears in the Authorization header.
    """
    config.validate()
    log = debug_log(config.debug)
    path = render_path(endpoint, path_params)

    content: Optional[bytes] = None
    content_type: Optional[str] = None
    if endpoint.has_body:
        if endpoint.options is None:
            raise ChapaValidationError(f"{endpoint.name} has no option model")
        model = coerce_options(endpoint.options, options)
        payload = model.to_wire()
        content = encode_body(endpoint.encoding, payload)
        content_type = CONTENT_TYPES[endpoint.encoding]
        log.json(f"{endpoint.name} body", payload)
    elif options is not None:
        raise ChapaValidationError(f"{endpoint.name} does not take a request body")

    query = {k: _scalar(v) for k, v in (params or {}).items() if v is not None}
    headers = build_headers(config, content_type=content_type)

    log(endpoint.method, {"endpoint": endpoint.name, "path": path, "params": query})
    log.json("Request headers", scrub_headers(headers))

    return PreparedRequest(
        endpoint=endpoint,
        method=endpoint.method,
        path=path,
        headers=headers,
        params=query,
        content=content,
    )


__all__ = [
    "CONTENT_TYPES",
    "PreparedRequest",
    "build_request",
    "build_headers",
    "coerce_options",
    "encode_body",
    "flatten_form",
    "merge_options",
    "optional_positive_int",
    "render_path",
    "require_str",
]
