from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from ..endpoints import (
    INITIALIZE_TRANSACTION,
    LIST_TRANSACTIONS,
    TRANSACTION_EVENTS,
    VERIFY_TRANSACTION,
)
from ..request import merge_options, optional_positive_int

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import InitializeOptions


# ------------------------------------------------------------------------------
# API
# ------------------------------------------------------------------------------

class TransactionsAPI:
    """
    Hosted checkout transactions.

    Common flows:
      - Initialize a payment and redirect the customer to ``checkout_url``.
      - Verify a payment by ``tx_ref`` once the callback/webhook arrives.
      - List recent transactions and fetch the event timeline of one.
    """

    def __init__(self, client: "_BaseClient"):
        self.client = client

    # ---- Initialize ----
    def initialize(self, options: "InitializeOptions | Dict[str, Any] | None" = None, **fields: Any):
        """
        Start a hosted checkout.

        Parameters
        ----------
        options : InitializeOptions | dict
            ``amount``, ``currency`` and ``tx_ref`` are required; everything
            else (customer details, callback/return URLs, customization, meta,
            subaccount splits) is optional and only sent when set.
        **fields
            Same fields as keywords; they override ``options``.

        Returns
        -------
        ChapaResponse[CheckoutUrl]
        """
        self.client.log("transactions.initialize()", {"fields": sorted(fields)})
        return self.client.call(INITIALIZE_TRANSACTION, merge_options(options, fields))

    # ---- Verify ----
    def verify(self, tx_ref: str):
        """Look up a transaction by the merchant reference used at initialize time."""
        self.client.log("transactions.verify()", {"tx_ref": tx_ref})
        return self.client.call(VERIFY_TRANSACTION, path_params={"tx_ref": tx_ref})

    # ---- List ----
    def list(self, *, page: Optional[int] = None, per_page: Optional[int] = None):
        optional_positive_int("page", page)
        optional_positive_int("per_page", per_page)
        self.client.log("transactions.list()", {"page": page, "per_page": per_page})
        return self.client.call(LIST_TRANSACTIONS, params={"page": page, "per_page": per_page})

    # ---- Events ----
    def events(self, ref_id: str):
        """Timeline of a transaction (``ref_id`` is Chapa's reference, not ``tx_ref``)."""
        self.client.log("transactions.events()", {"ref_id": ref_id})
        return self.client.call(TRANSACTION_EVENTS, path_params={"ref_id": ref_id})
