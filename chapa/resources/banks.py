from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from ..endpoints import GET_BALANCE, GET_BALANCES, LIST_BANKS, SWAP_CURRENCY
from ..errors import ChapaValidationError
from ..models import SwapOptions
from ..request import merge_options
from ..utils import normalize_currency

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient


class BanksAPI:
    """Supported banks, merchant balances and currency swaps."""

    def __init__(self, client: "_BaseClient"):
        self.client = client

    def list(self):
        """Banks and wallets that accept transfers; ``Bank.id`` is the ``bank_code`` for payouts."""
        self.client.log("banks.list()")
        return self.client.call(LIST_BANKS)

    def balances(self, currency: Optional[str] = None):
        """All wallet balances, or only the one for ``currency`` when given."""
        if currency is None:
            self.client.log("banks.balances()")
            return self.client.call(GET_BALANCES)
        try:
            code = normalize_currency(currency)
        except ValueError as e:
            raise ChapaValidationError(str(e), field="currency") from e
        self.client.log("banks.balances()", {"currency": code})
        return self.client.call(GET_BALANCE, path_params={"currency": code})

    def swap(self, options: "SwapOptions | Dict[str, Any] | None" = None, **fields: Any):
        """
        Convert between wallet currencies (e.g. USD -> ETB).

        Accepts either ``from``/``to`` (as a dict) or ``from_currency``/``to_currency``;
        keyword overrides replace the matching entry whichever spelling it used.
        """
        self.client.log("banks.swap()", {"fields": sorted(fields)})
        return self.client.call(SWAP_CURRENCY, merge_options(options, fields, SwapOptions))
