from __future__ import annotations
import base64
import secrets
import string
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from .debug import dprint, djson

Amount = Union[Decimal, str, int, float]

# ==============================================================================
# Currency / amount helpers
# ==============================================================================

def normalize_currency(code: str) -> str:
    """
    Normalize an ISO currency code to upper case (Chapa uses "ETB", "USD").
    """
    if not isinstance(code, str) or len(code.strip()) != 3 or not code.strip().isalpha():
        raise ValueError("currency must be a 3-letter ISO code such as 'ETB'")
    return code.strip().upper()


def _to_decimal(amount: Amount) -> Decimal:
    """
    Safely coerce to Decimal. Floats go through str() to avoid binary artifacts.
    """
    if isinstance(amount, bool):
        raise TypeError("amount must be Decimal, str, int, or float")
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, float):
        return Decimal(str(amount))
    if isinstance(amount, str):
        try:
            return Decimal(amount.strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount string: {amount!r}") from e
    raise TypeError("amount must be Decimal, str, int, or float")


def normalize_amount(amount: Amount) -> str:
    """
    Validate a positive amount and return its wire form.

    Strings are returned stripped but otherwise untouched ("12.50" stays
    "12.50"); numbers are rendered without exponent notation.
    """
    dec = _to_decimal(amount)
    if not dec.is_finite() or dec <= 0:
        raise ValueError("amount must be a positive number")
    if isinstance(amount, str):
        return amount.strip()
    return format(dec, "f")


# ==============================================================================
# Transaction references
# ==============================================================================

_TX_REF_ALPHABET = string.ascii_letters + string.digits


def generate_tx_ref(prefix: str = "TX-", size: int = 15, *, remove_prefix: bool = False) -> str:
    """
    Generate a random alphanumeric transaction reference, e.g. ``TX-a8Kd02LmQp1sZ7x``.
    """
    if not isinstance(size, int) or size <= 0:
        raise ValueError("size must be a positive integer")
    body = "".join(secrets.choice(_TX_REF_ALPHABET) for _ in range(size))
    ref = body if remove_prefix else f"{prefix or ''}{body}"
    dprint("utils.generate_tx_ref()", {"tx_ref": ref})
    return ref


# ==============================================================================
# Direct charge payload encryption
# ==============================================================================

def encrypt_data(plaintext: Union[str, bytes], encryption_key: str) -> str:
    """
    Encrypt a direct-charge payload with the merchant encryption key.

    Chapa expects 3DES in ECB mode with PKCS7 padding, base64 encoded. The key
    from the dashboard is used as-is and must be 16 or 24 bytes long.
    """
    if not encryption_key:
        raise ValueError("encryption_key is required")
    key = encryption_key.encode("utf-8")
    if len(key) not in (16, 24):
        raise ValueError("encryption_key must be 16 or 24 bytes long")
    data = plaintext.encode("utf-8") if isinstance(plaintext, str) else plaintext

    padder = padding.PKCS7(TripleDES.block_size).padder()
    padded = padder.update(data) + padder.finalize()
    encryptor = Cipher(TripleDES(key), modes.ECB()).encryptor()
    token = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(token).decode("ascii")


def decrypt_data(token: str, encryption_key: str) -> str:
    """Inverse of :func:`encrypt_data`; mostly useful in tests and debugging."""
    key = encryption_key.encode("utf-8")
    decryptor = Cipher(TripleDES(key), modes.ECB()).decryptor()
    padded = decryptor.update(base64.b64decode(token)) + decryptor.finalize()
    unpadder = padding.PKCS7(TripleDES.block_size).unpadder()
    return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")


# ==============================================================================
# Metadata sanitization
# ==============================================================================

_JSON_PRIMITIVES = (str, int, float, bool, type(None))


def _to_json_safe(value: Any) -> Any:
    if isinstance(value, _JSON_PRIMITIVES):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_to_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_json_safe(v) for k, v in value.items()}
    # Fallback to string
    return str(value)


def safe_metadata(md: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Produce a JSON-serializable metadata dict (keys coerced to str, values converted).
    Used for the free-form ``meta`` field of several request bodies.
    """
    md = md or {}
    if not isinstance(md, Mapping):
        raise TypeError("metadata must be a mapping")
    out = {str(k): _to_json_safe(v) for k, v in md.items()}
    djson("utils.safe_metadata()", out)
    return out


__all__ = [
    "Amount",
    "normalize_currency",
    "normalize_amount",
    "generate_tx_ref",
    "encrypt_data",
    "decrypt_data",
    "safe_metadata",
]
