from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Mapping, Union

from ..endpoints import AUTHORIZE_DIRECT_CHARGE, DIRECT_CHARGE
from ..errors import ChapaValidationError
from ..models import ChargeType, DirectChargeType
from ..request import merge_options
from ..utils import encrypt_data

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import AuthorizeDirectChargeOptions, DirectChargeOptions


def _charge_type(value: ChargeType) -> str:
    if isinstance(value, DirectChargeType):
        return value.value
    if not isinstance(value, str) or not value.strip():
        raise ChapaValidationError("charge_type is required and must be a non-empty string.", field="charge_type")
    return value.strip()


class DirectChargesAPI:
    """
    Charge a customer's mobile wallet without the hosted checkout.

    Flow:
      1. ``charge(type, ...)`` pushes the payment request to the wallet.
      2. For wallets that need an OTP/PIN, build the ``client`` payload with
         :meth:`encrypt` and confirm through ``authorize(type, ...)``.
    """

    def __init__(self, client: "_BaseClient"):
        self.client = client

    def charge(
        self,
        charge_type: ChargeType,
        options: "DirectChargeOptions | Dict[str, Any] | None" = None,
        **fields: Any,
    ):
        kind = _charge_type(charge_type)
        self.client.log("direct_charges.charge()", {"type": kind, "fields": sorted(fields)})
        return self.client.call(DIRECT_CHARGE, merge_options(options, fields), params={"type": kind})

    def authorize(
        self,
        charge_type: ChargeType,
        options: "AuthorizeDirectChargeOptions | Dict[str, Any] | None" = None,
        **fields: Any,
    ):
        """
        Confirm a pending direct charge.

        Chapa answers this one without the ``{status, data}`` envelope, so
        ``response.data`` holds the whole body (``message``, ``trx_ref``,
        ``processor_id``).
        """
        kind = _charge_type(charge_type)
        self.client.log("direct_charges.authorize()", {"type": kind, "fields": sorted(fields)})
        return self.client.call(AUTHORIZE_DIRECT_CHARGE, merge_options(options, fields), params={"type": kind})

    def encrypt(self, payload: Union[str, Mapping[str, Any]]) -> str:
        """
        Encrypt an authorization payload with the configured ``encryption_key``.

        Mappings are serialized to compact JSON first.
        """
        key = self.client.config.require_encryption_key()
        if isinstance(payload, Mapping):
            payload = json.dumps(dict(payload), separators=(",", ":"))
        try:
            return encrypt_data(payload, key)
        except ValueError as e:
            raise ChapaValidationError(str(e), field="encryption_key") from e
