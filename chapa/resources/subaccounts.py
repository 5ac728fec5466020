from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from ..endpoints import CREATE_SUBACCOUNT
from ..request import merge_options

if TYPE_CHECKING:  # pragma: no cover
    from ..client import _BaseClient
    from ..models import SubaccountOptions


class SubaccountsAPI:
    """Split-payment subaccounts; the returned id goes into ``InitializeOptions.subaccounts``."""

    def __init__(self, client: "_BaseClient"):
        self.client = client

    def create(self, options: "SubaccountOptions | Dict[str, Any] | None" = None, **fields: Any):
        self.client.log("subaccounts.create()", {"fields": sorted(fields)})
        return self.client.call(CREATE_SUBACCOUNT, merge_options(options, fields))
