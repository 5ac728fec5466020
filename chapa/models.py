from __future__ import annotations
import enum
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from .utils import normalize_amount, normalize_currency, safe_metadata


# =============================================================================
# Shared field types
# =============================================================================
def _amount(value: Any) -> str:
    try:
        return normalize_amount(value)
    except TypeError as e:
        # pydantic only turns ValueError/AssertionError into validation errors
        raise ValueError(str(e)) from e


def _currency(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("currency must be a string")
    return normalize_currency(value)


def _split_value(value: Any) -> Any:
    # checked as a positive number, sent exactly as given (25 stays 25)
    _amount(value)
    return value


def _as_decimal(value: Any) -> Decimal:
    return Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
AmountStr = Annotated[str, BeforeValidator(_amount)]
CurrencyStr = Annotated[str, BeforeValidator(_currency)]
SplitValue = Annotated[Any, BeforeValidator(_split_value)]

MAX_BULK_ITEMS = 100


# =============================================================================
# Base models
# =============================================================================
class _OptionsModel(BaseModel):
    """
    Strict model for request options: unknown fields are rejected so typos
    surface before anything is sent.
    """
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Populated fields only, by wire name; unset and None fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _APIModel(BaseModel):
    """
    Loose model that accepts extra fields so the SDK doesn't break
    when Chapa adds response properties.
    """
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )


# =============================================================================
# Transactions
# =============================================================================
class Customization(_OptionsModel):
    """Checkout page branding."""
    title: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None


class SplitType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"


class SubaccountSplit(_OptionsModel):
    """Routes part of a payment to a subaccount; overrides its default split when set."""
    id: NonEmptyStr
    split_type: Optional[SplitType] = None
    split_value: Optional[SplitValue] = None


class InitializeOptions(_OptionsModel):
    """
    Body of ``POST /transaction/initialize``.
    """
    amount: AmountStr
    currency: CurrencyStr
    tx_ref: NonEmptyStr
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    callback_url: Optional[str] = None
    return_url: Optional[str] = None
    customization: Optional[Customization] = None
    meta: Optional[Dict[str, Any]] = None
    subaccounts: Optional[List[SubaccountSplit]] = None

    @field_validator("meta", mode="before")
    @classmethod
    def _meta_json_safe(cls, v: Any) -> Any:
        return safe_metadata(v) if v is not None else None


class CheckoutUrl(_APIModel):
    checkout_url: str


class TransactionDetail(_APIModel):
    """
    Result of ``GET /transaction/verify/{tx_ref}``.
    """
    tx_ref: str
    amount: Decimal
    currency: Optional[str] = None
    status: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    charge: Optional[Decimal] = None
    mode: Optional[str] = None
    method: Optional[str] = None
    type: Optional[str] = None
    reference: Optional[str] = None
    customization: Optional[Dict[str, Any]] = None
    meta: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Customer(_APIModel):
    id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    mobile: Optional[str] = None


class TransactionSummary(_APIModel):
    """One row of ``GET /transactions``."""
    ref_id: str
    status: str
    amount: Decimal
    currency: str
    type: Optional[str] = None
    charge: Optional[Decimal] = None
    trans_id: Optional[str] = None
    payment_method: Optional[str] = None
    customer: Optional[Customer] = None
    created_at: Optional[datetime] = None


class Pagination(_APIModel):
    per_page: int
    current_page: int
    first_page_url: Optional[str] = None
    next_page_url: Optional[str] = None
    prev_page_url: Optional[str] = None


class TransactionPage(_APIModel):
    transactions: List[TransactionSummary]
    pagination: Pagination


class TransactionEvent(_APIModel):
    """One entry of the transaction timeline (``GET /transaction/events/{ref_id}``)."""
    item: int
    message: str
    event_type: str = Field(..., alias="type")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# Transfers
# =============================================================================
class TransferOptions(_OptionsModel):
    """
    Body of ``POST /transfers``.
    """
    account_number: NonEmptyStr
    amount: AmountStr
    bank_code: int = Field(..., gt=0)
    account_name: Optional[str] = None
    currency: Optional[CurrencyStr] = None
    reference: Optional[str] = None


class BulkTransferItem(_OptionsModel):
    account_number: NonEmptyStr
    amount: AmountStr
    bank_code: int = Field(..., gt=0)
    account_name: Optional[str] = None
    reference: Optional[str] = None


class BulkTransferOptions(_OptionsModel):
    """
    Body of ``POST /bulk-transfers``. Chapa accepts at most 100 items per batch.
    """
    title: NonEmptyStr
    currency: CurrencyStr
    bulk_data: List[BulkTransferItem] = Field(..., min_length=1, max_length=MAX_BULK_ITEMS)


class TransferDetail(_APIModel):
    """Result of ``GET /transfers/verify/{tx_ref}``."""
    tx_ref: str
    amount: Decimal
    status: str
    currency: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    mobile: Optional[str] = None
    charge: Optional[Decimal] = None
    mode: Optional[str] = None
    transfer_method: Optional[str] = None
    narration: Optional[str] = None
    chapa_transfer_id: Optional[str] = None
    bank_code: Optional[int] = None
    bank_name: Optional[str] = None
    cross_party_reference: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransferRecord(_APIModel):
    """One row of ``GET /transfers`` (also used for bulk batch verification)."""
    amount: Decimal
    status: str
    currency: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    charge: Optional[Decimal] = None
    transfer_type: Optional[str] = None
    chapa_reference: Optional[str] = None
    bank_code: Optional[int] = None
    bank_name: Optional[str] = None
    bank_reference: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkTransferBatch(_APIModel):
    id: int
    created_at: Optional[datetime] = None


# =============================================================================
# Banks, balances, swap
# =============================================================================
class Bank(_APIModel):
    id: int
    name: str
    slug: Optional[str] = None
    swift: Optional[str] = None
    acct_length: Optional[int] = None
    country_id: Optional[int] = None
    is_mobilemoney: Optional[int] = None
    is_rtgs: Optional[int] = None
    currency: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Balance(_APIModel):
    currency: str
    available_balance: Decimal
    ledger_balance: Optional[Decimal] = None


class SwapOptions(_OptionsModel):
    """
    Body of ``POST /swap``. ``from``/``to`` are Python keywords, hence the aliases.
    """
    amount: AmountStr
    from_currency: CurrencyStr = Field(..., alias="from")
    to_currency: CurrencyStr = Field(..., alias="to")

    @model_validator(mode="after")
    def _distinct_currencies(self) -> "SwapOptions":
        if self.from_currency == self.to_currency:
            raise ValueError("from and to currencies must differ")
        return self


class SwapResult(_APIModel):
    ref_id: str
    status: Optional[str] = None
    from_currency: Optional[str] = None
    to_currency: Optional[str] = None
    amount: Optional[Decimal] = None
    exchanged_amount: Optional[Decimal] = None
    charge: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# Direct charge
# =============================================================================
class DirectChargeType(str, enum.Enum):
    TELEBIRR = "telebirr"
    MPESA = "mpesa"
    AMOLE = "amole"
    CBEBIRR = "cbebirr"
    EBIRR = "ebirr"
    AWASHBIRR = "awashbirr"


ChargeType = Union[DirectChargeType, str]


class DirectChargeOptions(_OptionsModel):
    """
    Body of ``POST /charges?type=...``.
    """
    mobile: NonEmptyStr
    currency: CurrencyStr
    amount: AmountStr
    tx_ref: NonEmptyStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class DirectChargeMeta(_APIModel):
    message: Optional[str] = None
    status: Optional[str] = None
    ref_id: Optional[str] = None
    payment_status: Optional[str] = None


class DirectChargeResult(_APIModel):
    auth_type: str
    request_id: Optional[str] = Field(None, alias="requestID")
    meta: Optional[DirectChargeMeta] = None
    mode: Optional[str] = None


class AuthorizeDirectChargeOptions(_OptionsModel):
    """
    Body of ``POST /validate?type=...``. ``client`` is the encrypted payload
    (see :func:`chapa.utils.encrypt_data`).
    """
    reference: NonEmptyStr
    client: NonEmptyStr


class DirectChargeAuthorization(_APIModel):
    """The validate endpoint answers without the usual envelope."""
    message: str
    trx_ref: Optional[str] = None
    processor_id: Optional[str] = None


# =============================================================================
# Subaccounts
# =============================================================================
class SubaccountOptions(_OptionsModel):
    """
    Body of ``POST /subaccount``.

    ``split_value`` is a fraction in (0, 1] for percentage splits and a
    positive amount for flat splits.
    """
    business_name: NonEmptyStr
    account_name: NonEmptyStr
    bank_code: int = Field(..., gt=0)
    account_number: NonEmptyStr
    split_type: SplitType
    split_value: SplitValue

    @model_validator(mode="after")
    def _percentage_range(self) -> "SubaccountOptions":
        if self.split_type is SplitType.PERCENTAGE and _as_decimal(self.split_value) > 1:
            raise ValueError("percentage split_value must be a fraction between 0 and 1")
        return self


class SubaccountResult(_APIModel):
    subaccount_id: str

    @model_validator(mode="before")
    @classmethod
    def _accept_bracket_key(cls, data: Any) -> Any:
        # some responses use the form-style key "subaccounts[id]"
        if isinstance(data, dict) and "subaccount_id" not in data and "subaccounts[id]" in data:
            data = {**data, "subaccount_id": data["subaccounts[id]"]}
        return data


# =============================================================================
# Virtual accounts
# =============================================================================
class VirtualAccountOptions(_OptionsModel):
    """
    Body of ``POST /virtual-account``.
    """
    account_name: NonEmptyStr
    currency: CurrencyStr
    reference: NonEmptyStr
    amount: Optional[AmountStr] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    # strings pass through untouched; datetimes are sent in ISO 8601
    expires_at: Optional[Union[datetime, NonEmptyStr]] = None
    meta: Optional[Dict[str, Any]] = None

    @field_validator("meta", mode="before")
    @classmethod
    def _meta_json_safe(cls, v: Any) -> Any:
        return safe_metadata(v) if v is not None else None


class VirtualAccountTransactionOptions(_OptionsModel):
    """
    Body of ``POST /virtual-account/credit`` and ``/virtual-account/debit``.
    """
    account_number: NonEmptyStr
    amount: AmountStr
    reference: Optional[str] = None
    currency: Optional[CurrencyStr] = None
    narration: Optional[str] = None


class VirtualAccount(_APIModel):
    account_number: str
    account_name: Optional[str] = None
    currency: Optional[str] = None
    balance: Optional[Decimal] = None
    status: Optional[str] = None
    reference: Optional[str] = None
    bank_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VirtualAccountTransaction(_APIModel):
    account_number: Optional[str] = None
    type: Optional[str] = None
    amount: Decimal
    currency: Optional[str] = None
    reference: Optional[str] = None
    balance: Optional[Decimal] = None
    narration: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# Refunds
# =============================================================================
class RefundOptions(_OptionsModel):
    """
    Body of ``POST /refund/{tx_ref}``. Omit ``amount`` for a full refund.
    """
    reason: Optional[str] = None
    amount: Optional[AmountStr] = None
    reference: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    @field_validator("meta", mode="before")
    @classmethod
    def _meta_json_safe(cls, v: Any) -> Any:
        return safe_metadata(v) if v is not None else None


class RefundResult(_APIModel):
    tx_ref: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    reference: Optional[str] = None
    created_at: Optional[datetime] = None


# =============================================================================
# Envelope
# =============================================================================
T = TypeVar("T")


class ChapaResponse(BaseModel, Generic[T]):
    """
    The ``{status, message, data}`` wrapper every endpoint returns, with
    ``data`` parsed into the endpoint's result type. ``meta`` carries
    pagination for list endpoints that provide it.
    """
    model_config = ConfigDict(extra="ignore")

    status: str
    message: Any = None
    data: T
    meta: Optional[Dict[str, Any]] = None


__all__ = [
    "MAX_BULK_ITEMS",
    "Customization",
    "SplitType",
    "SubaccountSplit",
    "InitializeOptions",
    "CheckoutUrl",
    "TransactionDetail",
    "Customer",
    "TransactionSummary",
    "Pagination",
    "TransactionPage",
    "TransactionEvent",
    "TransferOptions",
    "BulkTransferItem",
    "BulkTransferOptions",
    "TransferDetail",
    "TransferRecord",
    "BulkTransferBatch",
    "Bank",
    "Balance",
    "SwapOptions",
    "SwapResult",
    "DirectChargeType",
    "ChargeType",
    "DirectChargeOptions",
    "DirectChargeMeta",
    "DirectChargeResult",
    "AuthorizeDirectChargeOptions",
    "DirectChargeAuthorization",
    "SubaccountOptions",
    "SubaccountResult",
    "VirtualAccountOptions",
    "VirtualAccountTransactionOptions",
    "VirtualAccount",
    "VirtualAccountTransaction",
    "RefundOptions",
    "RefundResult",
    "ChapaResponse",
]
