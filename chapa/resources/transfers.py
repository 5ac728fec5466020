from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..endpoints import (
    BULK_TRANSFER,
    LIST_TRANSFERS,
    TRANSFER,
    VERIFY_BULK_TRANSFER,
    VERIFY_TRANSFER,
)
from ..errors import ChapaValidationError
from ..request import merge_options, optional_positive_int

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import BulkTransferOptions, TransferOptions


def _batch_id(value: Union[int, str, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not str(value).strip():
        raise ChapaValidationError("batch_id must be a non-empty id.", field="batch_id")
    return str(value).strip()


class TransfersAPI:
    """
    Payouts to bank accounts and mobile wallets.

    ``create`` answers with the transfer reference as a plain string; use
    ``verify`` with that reference to follow it. Bulk batches are tracked by
    their numeric id through ``verify_bulk``.
    """

    def __init__(self, client: "_BaseClient"):
        self.client = client

    def create(self, options: "TransferOptions | Dict[str, Any] | None" = None, **fields: Any):
        self.client.log("transfers.create()", {"fields": sorted(fields)})
        return self.client.call(TRANSFER, merge_options(options, fields))

    def verify(self, tx_ref: str):
        self.client.log("transfers.verify()", {"tx_ref": tx_ref})
        return self.client.call(VERIFY_TRANSFER, path_params={"tx_ref": tx_ref})

    def list(self, *, page: Optional[int] = None, batch_id: Union[int, str, None] = None):
        optional_positive_int("page", page)
        params = {"page": page, "batch_id": _batch_id(batch_id)}
        self.client.log("transfers.list()", params)
        return self.client.call(LIST_TRANSFERS, params=params)

    def bulk(self, options: "BulkTransferOptions | Dict[str, Any] | None" = None, **fields: Any):
        """
        Queue up to 100 transfers in one batch.

        Returns
        -------
        ChapaResponse[BulkTransferBatch]
            ``data.id`` is the batch id to pass to :meth:`verify_bulk`.
        """
        self.client.log("transfers.bulk()", {"fields": sorted(fields)})
        return self.client.call(BULK_TRANSFER, merge_options(options, fields))

    def verify_bulk(self, batch_id: Union[int, str]):
        """Transfers belonging to one bulk batch."""
        bid = _batch_id(batch_id)
        if bid is None:
            raise ChapaValidationError("batch_id is required.", field="batch_id")
        self.client.log("transfers.verify_bulk()", {"batch_id": bid})
        return self.client.call(VERIFY_BULK_TRANSFER, params={"batch_id": bid})
