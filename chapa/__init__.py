"""
Chapa-Python SDK

Unofficial, framework-agnostic client for the Chapa payments API:
- Hosted checkout transactions (initialize / verify / list / events)
- Transfers and bulk transfers
- Banks, balances and currency swaps
- Direct (wallet) charges and their authorization
- Subaccounts, virtual accounts and refunds
- Webhook parsing & signature verification
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------
__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Public API re-exports
# ---------------------------------------------------------------------------
from .config import ChapaConfig
from .client import ChapaClient, AsyncChapaClient
from .errors import (
    ErrorKind,
    ChapaError,
    ChapaValidationError,
    ChapaConfigError,
    ChapaWebhookError,
    ChapaAPIError,
    ChapaTransportError,
    ChapaDecodeError,
    ChapaRemoteError,
)
from .models import (
    ChapaResponse,
    Customization,
    SubaccountSplit,
    SplitType,
    InitializeOptions,
    TransferOptions,
    BulkTransferItem,
    BulkTransferOptions,
    SwapOptions,
    DirectChargeType,
    DirectChargeOptions,
    AuthorizeDirectChargeOptions,
    SubaccountOptions,
    VirtualAccountOptions,
    VirtualAccountTransactionOptions,
    RefundOptions,
)
from .resources import (
    TransactionsAPI,
    TransfersAPI,
    BanksAPI,
    DirectChargesAPI,
    SubaccountsAPI,
    VirtualAccountsAPI,
    RefundsAPI,
    # webhook helpers re-exported via resources.__all__
    WebhookEvent,
    WebhookRouter,
    parse_event,
    verify_signature,
    verify_and_parse,
)
from .utils import (
    normalize_currency,
    normalize_amount,
    generate_tx_ref,
    encrypt_data,
    safe_metadata,
)
from .debug import DebugLog, dprint, djson, is_enabled as debug_enabled, set_debug as set_debug_enabled

# ---------------------------------------------------------------------------
# Debug print on import (sanitized; only if CHAPA_DEBUG is truthy)
# ---------------------------------------------------------------------------
dprint("SDK import", {"version": __version__})

__all__ = (
    "__version__",
    # core
    "ChapaConfig",
    "ChapaClient",
    "AsyncChapaClient",
    # errors
    "ErrorKind",
    "ChapaError",
    "ChapaValidationError",
    "ChapaConfigError",
    "ChapaWebhookError",
    "ChapaAPIError",
    "ChapaTransportError",
    "ChapaDecodeError",
    "ChapaRemoteError",
    # models
    "ChapaResponse",
    "Customization",
    "SubaccountSplit",
    "SplitType",
    "InitializeOptions",
    "TransferOptions",
    "BulkTransferItem",
    "BulkTransferOptions",
    "SwapOptions",
    "DirectChargeType",
    "DirectChargeOptions",
    "AuthorizeDirectChargeOptions",
    "SubaccountOptions",
    "VirtualAccountOptions",
    "VirtualAccountTransactionOptions",
    "RefundOptions",
    # resources
    "TransactionsAPI",
    "TransfersAPI",
    "BanksAPI",
    "DirectChargesAPI",
    "SubaccountsAPI",
    "VirtualAccountsAPI",
    "RefundsAPI",
    # webhook helpers
    "WebhookEvent",
    "WebhookRouter",
    "parse_event",
    "verify_signature",
    "verify_and_parse",
    # utils
    "normalize_currency",
    "normalize_amount",
    "generate_tx_ref",
    "encrypt_data",
    "safe_metadata",
    # debug controls
    "DebugLog",
    "dprint",
    "djson",
    "debug_enabled",
    "set_debug_enabled",
)
