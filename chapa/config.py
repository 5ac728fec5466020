from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from .debug import debug_log, mask_key
from .errors import ChapaConfigError


DEFAULT_BASE_URL = "https://api.chapa.co"
DEFAULT_VERSION = "v1"
DEFAULT_TIMEOUT = 30.0

# Values shipped in sample .env files; never valid credentials.
_PLACEHOLDER_KEYS = {"placeholder_api_key", "CHASECK_TEST-XXXXXXXXXXXXXXX", "your_secret_key"}


# ----------------------------- helpers -----------------------------

def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    return v not in ("0", "false", "no", "off", "")


def _parse_float(value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ChapaConfigError(f"timeout must be a number, got {value!r}", field="timeout") from None


def _normalize_base_url(url: Optional[str]) -> str:
    url = (url or "").strip()
    if not url:
        return DEFAULT_BASE_URL
    # Remove trailing slash to avoid double slashes when building paths
    return url.rstrip("/")


def _normalize_version(version: Optional[str]) -> str:
    v = (version or "").strip().strip("/")
    return v or DEFAULT_VERSION


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# ----------------------------- config -----------------------------

@dataclass
class ChapaConfig:
    """
    Configuration with precedence:
      explicit kwargs > environment (.env when loaded) > defaults

    Every authenticated call needs ``secret_key``; it is sent as a bearer token.
    """

    # Credentials
    secret_key: Optional[str] = None
    public_key: Optional[str] = None
    encryption_key: Optional[str] = None

    # Routing / network
    base_url: Optional[str] = None
    version: Optional[str] = None
    timeout: Optional[float] = None
    default_headers: Dict[str, str] = field(default_factory=dict)

    # Diagnostics
    debug: Optional[bool] = None

    # Internal: where each field was sourced from (arg/env/default) for debugging
    _source: Dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        env = os.environ

        if _blank(self.secret_key):
            self.secret_key = (env.get("CHAPA_SECRET_KEY") or "").strip() or None
            self._source["secret_key"] = "env"
        else:
            self.secret_key = self.secret_key.strip()
            self._source["secret_key"] = "arg"

        if _blank(self.public_key):
            self.public_key = (
                env.get("CHAPA_PUBLIC_KEY") or env.get("CHAPA_API_PUBLIC_KEY") or ""
            ).strip() or None
            self._source["public_key"] = "env"
        else:
            self._source["public_key"] = "arg"

        if _blank(self.encryption_key):
            self.encryption_key = (env.get("CHAPA_ENCRYPTION_KEY") or "").strip() or None
            self._source["encryption_key"] = "env"
        else:
            self._source["encryption_key"] = "arg"

        if _blank(self.base_url):
            self.base_url = _normalize_base_url(env.get("CHAPA_BASE_URL"))
            self._source["base_url"] = "env/default"
        else:
            self.base_url = _normalize_base_url(self.base_url)
            self._source["base_url"] = "arg"

        if _blank(self.version):
            self.version = _normalize_version(env.get("CHAPA_VERSION"))
            self._source["version"] = "env/default"
        else:
            self.version = _normalize_version(self.version)
            self._source["version"] = "arg"

        if self.timeout is None:
            self.timeout = _parse_float(env.get("CHAPA_TIMEOUT"), DEFAULT_TIMEOUT)
            self._source["timeout"] = "env/default"
        else:
            self.timeout = float(self.timeout)
            self._source["timeout"] = "arg"
        if self.timeout <= 0:
            raise ChapaConfigError("timeout must be positive", field="timeout")

        if self.debug is None:
            self.debug = _parse_bool(env.get("CHAPA_DEBUG"), False)
            self._source["debug"] = "env/default"
        else:
            self.debug = bool(self.debug)
            self._source["debug"] = "arg"

        self.default_headers = dict(self.default_headers or {})

        debug_log(self.debug)("Loaded config:", self.masked())

    # -------- validation & utils --------
    def validate(self) -> "ChapaConfig":
        """Ensure a usable secret key is present; no network access."""
        if _blank(self.secret_key) or self.secret_key in _PLACEHOLDER_KEYS:
            debug_log(self.debug)("Validation failed: secret_key missing", {"secret_key": mask_key(self.secret_key)})
            raise ChapaConfigError(
                "secret_key is required: pass secret_key=... or set CHAPA_SECRET_KEY.",
                field="secret_key",
            )
        debug_log(self.debug)("Validation OK")
        return self

    def require_encryption_key(self) -> str:
        """Ensure an encryption key is present for helpers that need it."""
        if _blank(self.encryption_key):
            raise ChapaConfigError(
                "encryption_key is required: pass encryption_key=... or set CHAPA_ENCRYPTION_KEY.",
                field="encryption_key",
            )
        return self.encryption_key

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/{self.version}"

    def masked(self) -> Dict[str, Any]:
        """Return a sanitized dict for logging/diagnostics."""
        return {
            "secret_key": mask_key(self.secret_key),
            "public_key": mask_key(self.public_key),
            "encryption_key": "***" if self.encryption_key else "(empty)",
            "base_url": self.base_url,
            "version": self.version,
            "timeout": self.timeout,
            "debug": self.debug,
            "default_headers": sorted(self.default_headers),
            "source": dict(self._source),
        }

    def copy_with(
        self,
        *,
        secret_key: Optional[str] = None,
        public_key: Optional[str] = None,
        encryption_key: Optional[str] = None,
        base_url: Optional[str] = None,
        version: Optional[str] = None,
        timeout: Optional[float] = None,
        default_headers: Optional[Dict[str, str]] = None,
        debug: Optional[bool] = None,
    ) -> "ChapaConfig":
        """Create a modified copy (handy in tests)."""
        return replace(
            self,
            secret_key=self.secret_key if secret_key is None else secret_key,
            public_key=self.public_key if public_key is None else public_key,
            encryption_key=self.encryption_key if encryption_key is None else encryption_key,
            base_url=self.base_url if base_url is None else base_url,
            version=self.version if version is None else version,
            timeout=self.timeout if timeout is None else float(timeout),
            default_headers=dict(self.default_headers if default_headers is None else default_headers),
            debug=self.debug if debug is None else bool(debug),
        )

    # -------- alt constructors --------
    @classmethod
    def from_env(cls, *, dotenv: bool = True, dotenv_path: Optional[str] = None) -> "ChapaConfig":
        """Build config strictly from the environment, loading ``.env`` first if asked."""
        if dotenv:
            load_dotenv(dotenv_path)
        return cls().validate()


__all__ = ["ChapaConfig", "DEFAULT_BASE_URL", "DEFAULT_VERSION", "DEFAULT_TIMEOUT"]
