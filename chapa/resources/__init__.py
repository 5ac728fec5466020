"""
Resource APIs for the Chapa SDK.

Public exports:

- TransactionsAPI
- TransfersAPI
- BanksAPI
- DirectChargesAPI
- SubaccountsAPI
- VirtualAccountsAPI
- RefundsAPI

Webhook helpers:

- WebhookEvent
- WebhookRouter
- parse_event
- verify_signature
- verify_and_parse
"""
from __future__ import annotations

from .transactions import TransactionsAPI
from .transfers import TransfersAPI
from .banks import BanksAPI
from .direct_charges import DirectChargesAPI
from .subaccounts import SubaccountsAPI
from .virtual_accounts import VirtualAccountsAPI
from .refunds import RefundsAPI
from .webhooks import (
    WebhookEvent,
    WebhookRouter,
    parse_event,
    sign_body,
    sign_secret,
    verify_signature,
    verify_and_parse,
)

__all__ = (
    "TransactionsAPI",
    "TransfersAPI",
    "BanksAPI",
    "DirectChargesAPI",
    "SubaccountsAPI",
    "VirtualAccountsAPI",
    "RefundsAPI",
    "WebhookEvent",
    "WebhookRouter",
    "parse_event",
    "sign_body",
    "sign_secret",
    "verify_signature",
    "verify_and_parse",
)
