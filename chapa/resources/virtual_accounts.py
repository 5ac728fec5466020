from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from ..endpoints import (
    CREATE_VIRTUAL_ACCOUNT,
    CREDIT_VIRTUAL_ACCOUNT,
    DEBIT_VIRTUAL_ACCOUNT,
    GET_VIRTUAL_ACCOUNT,
    LIST_VIRTUAL_ACCOUNTS,
    VIRTUAL_ACCOUNT_HISTORY,
)
from ..request import merge_options, optional_positive_int

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import VirtualAccountOptions, VirtualAccountTransactionOptions


class VirtualAccountsAPI:
    """
    Virtual accounts: dedicated account numbers per customer/reference.

    Credit/debit move funds on an existing account; ``history`` lists those
    movements.
    """

    def __init__(self, client: "_BaseClient"):
        self.client = client

    # ---- Create / Read ----
    def create(self, options: "VirtualAccountOptions | Dict[str, Any] | None" = None, **fields: Any):
        self.client.log("virtual_accounts.create()", {"fields": sorted(fields)})
        return self.client.call(CREATE_VIRTUAL_ACCOUNT, merge_options(options, fields))

    def get(self, account_number: str):
        self.client.log("virtual_accounts.get()", {"account_number": account_number})
        return self.client.call(GET_VIRTUAL_ACCOUNT, path_params={"account_number": account_number})

    def list(self, *, page: Optional[int] = None):
        optional_positive_int("page", page)
        self.client.log("virtual_accounts.list()", {"page": page})
        return self.client.call(LIST_VIRTUAL_ACCOUNTS, params={"page": page})

    # ---- Movements ----
    def credit(self, options: "VirtualAccountTransactionOptions | Dict[str, Any] | None" = None, **fields: Any):
        self.client.log("virtual_accounts.credit()", {"fields": sorted(fields)})
        return self.client.call(CREDIT_VIRTUAL_ACCOUNT, merge_options(options, fields))

    def debit(self, options: "VirtualAccountTransactionOptions | Dict[str, Any] | None" = None, **fields: Any):
        self.client.log("virtual_accounts.debit()", {"fields": sorted(fields)})
        return self.client.call(DEBIT_VIRTUAL_ACCOUNT, merge_options(options, fields))

    def history(self, account_number: str, *, page: Optional[int] = None):
        optional_positive_int("page", page)
        self.client.log("virtual_accounts.history()", {"account_number": account_number, "page": page})
        return self.client.call(
            VIRTUAL_ACCOUNT_HISTORY,
            path_params={"account_number": account_number},
            params={"page": page},
        )
