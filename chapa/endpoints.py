"""
Static catalog of the Chapa REST endpoints this SDK speaks.

Each :class:`Endpoint` says how to build the request (method, path template,
body encoding, option model) and how to read the answer (result type, and
whether the result sits under ``data`` or is the whole body).
"""
from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple, Type

from .models import (
    AuthorizeDirectChargeOptions,
    Balance,
    Bank,
    BulkTransferBatch,
    BulkTransferOptions,
    CheckoutUrl,
    DirectChargeAuthorization,
    DirectChargeOptions,
    DirectChargeResult,
    InitializeOptions,
    RefundOptions,
    RefundResult,
    SubaccountOptions,
    SubaccountResult,
    SwapOptions,
    SwapResult,
    TransactionDetail,
    TransactionEvent,
    TransactionPage,
    TransferDetail,
    TransferOptions,
    TransferRecord,
    VirtualAccount,
    VirtualAccountOptions,
    VirtualAccountTransaction,
    VirtualAccountTransactionOptions,
    _OptionsModel,
)

Encoding = Literal["json", "form"]

_FORMATTER = string.Formatter()


@dataclass(frozen=True)
class Endpoint:
    name: str
    method: str
    path: str
    result: Any
    encoding: Optional[Encoding] = None
    options: Optional[Type[_OptionsModel]] = None
    # False when the API answers with the payload itself instead of {status, message, data}
    envelope: bool = True

    @property
    def path_params(self) -> Tuple[str, ...]:
        return tuple(name for _, name, _, _ in _FORMATTER.parse(self.path) if name)

    @property
    def has_body(self) -> bool:
        return self.encoding is not None


# ----------------------------- transactions -----------------------------
INITIALIZE_TRANSACTION = Endpoint(
    "initialize_transaction", "POST", "/transaction/initialize",
    CheckoutUrl, encoding="form", options=InitializeOptions,
)
VERIFY_TRANSACTION = Endpoint(
    "verify_transaction", "GET", "/transaction/verify/{tx_ref}", TransactionDetail,
)
LIST_TRANSACTIONS = Endpoint(
    "list_transactions", "GET", "/transactions", TransactionPage,
)
TRANSACTION_EVENTS = Endpoint(
    "transaction_events", "GET", "/transaction/events/{ref_id}", List[TransactionEvent],
)

# ----------------------------- transfers -----------------------------
TRANSFER = Endpoint(
    "transfer", "POST", "/transfers", str, encoding="json", options=TransferOptions,
)
VERIFY_TRANSFER = Endpoint(
    "verify_transfer", "GET", "/transfers/verify/{tx_ref}", TransferDetail,
)
LIST_TRANSFERS = Endpoint(
    "list_transfers", "GET", "/transfers", List[TransferRecord],
)
BULK_TRANSFER = Endpoint(
    "bulk_transfer", "POST", "/bulk-transfers",
    BulkTransferBatch, encoding="json", options=BulkTransferOptions,
)
VERIFY_BULK_TRANSFER = Endpoint(
    "verify_bulk_transfer", "GET", "/transfers", List[TransferRecord],
)

# ----------------------------- banks & balances -----------------------------
LIST_BANKS = Endpoint("list_banks", "GET", "/banks", List[Bank])
GET_BALANCES = Endpoint("get_balances", "GET", "/balances", List[Balance])
GET_BALANCE = Endpoint("get_balance", "GET", "/balances/{currency}", List[Balance])
SWAP_CURRENCY = Endpoint(
    "swap_currency", "POST", "/swap", SwapResult, encoding="json", options=SwapOptions,
)

# ----------------------------- direct charge -----------------------------
DIRECT_CHARGE = Endpoint(
    "direct_charge", "POST", "/charges",
    DirectChargeResult, encoding="form", options=DirectChargeOptions,
)
AUTHORIZE_DIRECT_CHARGE = Endpoint(
    "authorize_direct_charge", "POST", "/validate",
    DirectChargeAuthorization, encoding="form", options=AuthorizeDirectChargeOptions,
    envelope=False,
)

# ----------------------------- subaccounts -----------------------------
CREATE_SUBACCOUNT = Endpoint(
    "create_subaccount", "POST", "/subaccount",
    SubaccountResult, encoding="json", options=SubaccountOptions,
)

# ----------------------------- virtual accounts -----------------------------
CREATE_VIRTUAL_ACCOUNT = Endpoint(
    "create_virtual_account", "POST", "/virtual-account",
    VirtualAccount, encoding="json", options=VirtualAccountOptions,
)
GET_VIRTUAL_ACCOUNT = Endpoint(
    "get_virtual_account", "GET", "/virtual-account/{account_number}", VirtualAccount,
)
CREDIT_VIRTUAL_ACCOUNT = Endpoint(
    "credit_virtual_account", "POST", "/virtual-account/credit",
    VirtualAccountTransaction, encoding="json", options=VirtualAccountTransactionOptions,
)
DEBIT_VIRTUAL_ACCOUNT = Endpoint(
    "debit_virtual_account", "POST", "/virtual-account/debit",
    VirtualAccountTransaction, encoding="json", options=VirtualAccountTransactionOptions,
)
LIST_VIRTUAL_ACCOUNTS = Endpoint(
    "list_virtual_accounts", "GET", "/virtual-account", List[VirtualAccount],
)
VIRTUAL_ACCOUNT_HISTORY = Endpoint(
    "virtual_account_history", "GET", "/virtual-account/history/{account_number}",
    List[VirtualAccountTransaction],
)

# ----------------------------- refunds -----------------------------
REFUND = Endpoint(
    "refund", "POST", "/refund/{tx_ref}", RefundResult, encoding="form", options=RefundOptions,
)


ENDPOINTS: Dict[str, Endpoint] = {
    e.name: e
    for e in (
        INITIALIZE_TRANSACTION,
        VERIFY_TRANSACTION,
        LIST_TRANSACTIONS,
        TRANSACTION_EVENTS,
        TRANSFER,
        VERIFY_TRANSFER,
        LIST_TRANSFERS,
        BULK_TRANSFER,
        VERIFY_BULK_TRANSFER,
        LIST_BANKS,
        GET_BALANCES,
        GET_BALANCE,
        SWAP_CURRENCY,
        DIRECT_CHARGE,
        AUTHORIZE_DIRECT_CHARGE,
        CREATE_SUBACCOUNT,
        CREATE_VIRTUAL_ACCOUNT,
        GET_VIRTUAL_ACCOUNT,
        CREDIT_VIRTUAL_ACCOUNT,
        DEBIT_VIRTUAL_ACCOUNT,
        LIST_VIRTUAL_ACCOUNTS,
        VIRTUAL_ACCOUNT_HISTORY,
        REFUND,
    )
}


__all__ = ["Endpoint", "ENDPOINTS"] + [name.upper() for name in ENDPOINTS]
