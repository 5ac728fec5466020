"""
Tests for chapa.config: precedence, validation and masking.
"""

import pytest

from chapa.config import DEFAULT_BASE_URL, ChapaConfig
from chapa.errors import ChapaConfigError, ChapaValidationError

from conftest import SECRET


class TestResolution:
    """Explicit kwargs beat environment, environment beats defaults."""

    def test_defaults(self):
        cfg = ChapaConfig(secret_key=SECRET)
        assert cfg.base_url == DEFAULT_BASE_URL
        assert cfg.version == "v1"
        assert cfg.timeout == 30.0
        assert cfg.debug is False
        assert cfg.api_url == "https://api.chapa.co/v1"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("CHAPA_SECRET_KEY", SECRET)
        monkeypatch.setenv("CHAPA_BASE_URL", "https://sandbox.example/")
        monkeypatch.setenv("CHAPA_VERSION", "/v2/")
        monkeypatch.setenv("CHAPA_TIMEOUT", "12.5")
        cfg = ChapaConfig()
        assert cfg.secret_key == SECRET
        assert cfg.api_url == "https://sandbox.example/v2"
        assert cfg.timeout == 12.5

    def test_explicit_beats_env(self, monkeypatch):
        monkeypatch.setenv("CHAPA_SECRET_KEY", "CHASECK_TEST-from-env")
        cfg = ChapaConfig(secret_key="  CHASECK_TEST-explicit  ")
        assert cfg.secret_key == "CHASECK_TEST-explicit"

    def test_public_key_legacy_env_name(self, monkeypatch):
        monkeypatch.setenv("CHAPA_API_PUBLIC_KEY", "CHAPUBK_TEST-legacy")
        assert ChapaConfig(secret_key=SECRET).public_key == "CHAPUBK_TEST-legacy"

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("CHAPA_TIMEOUT", "soon")
        with pytest.raises(ChapaConfigError) as ei:
            ChapaConfig(secret_key=SECRET)
        assert ei.value.field == "timeout"
        with pytest.raises(ChapaConfigError):
            ChapaConfig(secret_key=SECRET, timeout=0)


class TestValidate:
    def test_missing_secret_key(self):
        with pytest.raises(ChapaConfigError) as ei:
            ChapaConfig().validate()
        assert ei.value.field == "secret_key"
        # config errors are validation errors (and ValueErrors)
        assert isinstance(ei.value, ChapaValidationError)
        assert isinstance(ei.value, ValueError)

    @pytest.mark.parametrize("key", ["placeholder_api_key", "CHASECK_TEST-XXXXXXXXXXXXXXX", "   "])
    def test_placeholder_counts_as_missing(self, key):
        with pytest.raises(ChapaConfigError):
            ChapaConfig(secret_key=key).validate()

    def test_validate_returns_self(self):
        cfg = ChapaConfig(secret_key=SECRET)
        assert cfg.validate() is cfg

    def test_require_encryption_key(self):
        with pytest.raises(ChapaConfigError) as ei:
            ChapaConfig(secret_key=SECRET).require_encryption_key()
        assert ei.value.field == "encryption_key"
        assert ChapaConfig(secret_key=SECRET, encryption_key="k" * 24).require_encryption_key() == "k" * 24


class TestHelpers:
    def test_masked_hides_secrets(self):
        cfg = ChapaConfig(secret_key=SECRET, encryption_key="k" * 24)
        masked = cfg.masked()
        assert masked["secret_key"] == "CHASECK_TEST-***"
        assert masked["encryption_key"] == "***"
        assert SECRET not in repr(masked)

    def test_copy_with(self):
        cfg = ChapaConfig(secret_key=SECRET, default_headers={"X-Trace": "1"})
        other = cfg.copy_with(timeout=5, base_url="https://example.test/")
        assert other.timeout == 5.0
        assert other.api_url == "https://example.test/v1"
        assert other.secret_key == SECRET
        assert other.default_headers == {"X-Trace": "1"}
        assert cfg.timeout == 30.0

    def test_from_env_loads_dotenv(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(f"CHAPA_SECRET_KEY={SECRET}\nCHAPA_TIMEOUT=7\n", encoding="utf-8")
        cfg = ChapaConfig.from_env(dotenv_path=str(env_file))
        assert cfg.secret_key == SECRET
        assert cfg.timeout == 7.0

    def test_from_env_without_dotenv_requires_key(self):
        with pytest.raises(ChapaConfigError):
            ChapaConfig.from_env(dotenv=False)
