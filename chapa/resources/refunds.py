from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from ..endpoints import REFUND
from ..request import merge_options

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import RefundOptions


class RefundsAPI:
    """
    Refunds for completed checkout transactions.

    Omit ``amount`` for a full refund (when your account allows it).
    """

    def __init__(self, client: "_BaseClient"):
        self.client = client

    def create(self, tx_ref: str, options: "RefundOptions | Dict[str, Any] | None" = None, **fields: Any):
        """
        Refund a transaction.

        Parameters
        ----------
        tx_ref : str
            Merchant reference of the transaction to refund.
        options : RefundOptions | dict, optional
            ``reason``, ``amount`` (partial refund), ``reference``, ``meta``.

        Returns
        -------
        ChapaResponse[RefundResult]
        """
        body = merge_options(options, fields)
        self.client.log("refunds.create()", {"tx_ref": tx_ref})
        return self.client.call(REFUND, {} if body is None else body, path_params={"tx_ref": tx_ref})
