from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Union

import httpx

from .config import ChapaConfig
from .debug import DebugLog, debug_log
from .endpoints import Endpoint
from .errors import ChapaTransportError
from .models import ChargeType, ChapaResponse
from .request import PreparedRequest, build_request
from .resources import (
    BanksAPI,
    DirectChargesAPI,
    RefundsAPI,
    SubaccountsAPI,
    TransactionsAPI,
    TransfersAPI,
    VirtualAccountsAPI,
)
from .response import map_response


# -------------------- constants --------------------

REQUEST_ID_HEADERS: Tuple[str, ...] = ("X-Request-ID", "X-Request-Id", "CF-Ray")

Options = Union[Mapping[str, Any], Any, None]


def _first_header(headers: httpx.Headers, names: Tuple[str, ...]) -> Optional[str]:
    for n in names:
        v = headers.get(n)
        if v:
            return v
    return None


class _BaseClient:
    """
    Shared wiring for the sync and async clients.

    Resource groups are available as attributes (``client.transactions``,
    ``client.transfers``...) and every endpoint also has a flat method of the
    same name as in the endpoint catalog. On :class:`AsyncChapaClient` the flat
    and resource methods return awaitables; input validation still happens
    immediately, before anything is awaited.
    """

    config: ChapaConfig
    log: DebugLog

    def _init_resources(self) -> None:
        self.transactions = TransactionsAPI(self)
        self.transfers = TransfersAPI(self)
        self.banks = BanksAPI(self)
        self.direct_charges = DirectChargesAPI(self)
        self.subaccounts = SubaccountsAPI(self)
        self.virtual_accounts = VirtualAccountsAPI(self)
        self.refunds = RefundsAPI(self)

    def _url(self, prepared: PreparedRequest) -> str:
        return f"{self.config.api_url}{prepared.path}"

    def _map(self, prepared: PreparedRequest, r: httpx.Response) -> ChapaResponse:
        req_id = _first_header(r.headers, REQUEST_ID_HEADERS)
        self.log("Response", {"endpoint": prepared.endpoint.name, "status": r.status_code, "request_id": req_id})
        return map_response(
            prepared.endpoint,
            r.status_code,
            r.content,
            method=prepared.method,
            url=self._url(prepared),
            request_id=req_id,
            log=self.log,
        )

    def _transport_error(self, prepared: PreparedRequest, e: httpx.HTTPError) -> ChapaTransportError:
        self.log("Network error", {"endpoint": prepared.endpoint.name, "error": repr(e)})
        return ChapaTransportError(
            str(e) or type(e).__name__,
            method=prepared.method,
            url=self._url(prepared),
        )

    def prepare(
        self,
        endpoint: Endpoint,
        options: Options = None,
        *,
        path_params: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> PreparedRequest:
        return build_request(self.config, endpoint, options, path_params=path_params, params=params)

    def call(
        self,
        endpoint: Endpoint,
        options: Options = None,
        *,
        path_params: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        prepared = self.prepare(endpoint, options, path_params=path_params, params=params)
        return self.send(prepared)

    def send(self, prepared: PreparedRequest) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError

    # ------------ flat facade: transactions ------------
    def initialize_transaction(self, options: Options = None, **fields: Any):
        return self.transactions.initialize(options, **fields)

    def verify_transaction(self, tx_ref: str):
        return self.transactions.verify(tx_ref)

    def list_transactions(self, *, page: Optional[int] = None, per_page: Optional[int] = None):
        return self.transactions.list(page=page, per_page=per_page)

    def transaction_events(self, ref_id: str):
        return self.transactions.events(ref_id)

    # ------------ flat facade: transfers ------------
    def transfer(self, options: Options = None, **fields: Any):
        return self.transfers.create(options, **fields)

    def verify_transfer(self, tx_ref: str):
        return self.transfers.verify(tx_ref)

    def list_transfers(self, *, page: Optional[int] = None, batch_id: Optional[Union[int, str]] = None):
        return self.transfers.list(page=page, batch_id=batch_id)

    def bulk_transfer(self, options: Options = None, **fields: Any):
        return self.transfers.bulk(options, **fields)

    def verify_bulk_transfer(self, batch_id: Union[int, str]):
        return self.transfers.verify_bulk(batch_id)

    # ------------ flat facade: banks & balances ------------
    def list_banks(self):
        return self.banks.list()

    def get_balances(self):
        return self.banks.balances()

    def get_balance(self, currency: str):
        return self.banks.balances(currency)

    def swap_currency(self, options: Options = None, **fields: Any):
        return self.banks.swap(options, **fields)

    # ------------ flat facade: direct charge ------------
    def direct_charge(self, charge_type: ChargeType, options: Options = None, **fields: Any):
        return self.direct_charges.charge(charge_type, options, **fields)

    def authorize_direct_charge(self, charge_type: ChargeType, options: Options = None, **fields: Any):
        return self.direct_charges.authorize(charge_type, options, **fields)

    # ------------ flat facade: subaccounts ------------
    def create_subaccount(self, options: Options = None, **fields: Any):
        return self.subaccounts.create(options, **fields)

    # ------------ flat facade: virtual accounts ------------
    def create_virtual_account(self, options: Options = None, **fields: Any):
        return self.virtual_accounts.create(options, **fields)

    def get_virtual_account(self, account_number: str):
        return self.virtual_accounts.get(account_number)

    def credit_virtual_account(self, options: Options = None, **fields: Any):
        return self.virtual_accounts.credit(options, **fields)

    def debit_virtual_account(self, options: Options = None, **fields: Any):
        return self.virtual_accounts.debit(options, **fields)

    def list_virtual_accounts(self, *, page: Optional[int] = None):
        return self.virtual_accounts.list(page=page)

    def virtual_account_history(self, account_number: str, *, page: Optional[int] = None):
        return self.virtual_accounts.history(account_number, page=page)

    # ------------ flat facade: refunds ------------
    def refund(self, tx_ref: str, options: Options = None, **fields: Any):
        return self.refunds.create(tx_ref, options, **fields)


def _resolve_config(config: Optional[ChapaConfig], secret_key: Optional[str]) -> ChapaConfig:
    if config is None:
        config = ChapaConfig(secret_key=secret_key)
    elif secret_key:
        config = config.copy_with(secret_key=secret_key)
    return config.validate()


class ChapaClient(_BaseClient):
    """
    Lightweight sync client for the Chapa REST API.

    - Sends ``Authorization: Bearer <secret_key>`` on every call.
    - One method per endpoint; results are ``ChapaResponse`` objects with typed ``data``.
    - No automatic retries: inspect ``ChapaAPIError.retryable`` and decide.
    - Prints sanitized debug logs (Authorization redacted) when CHAPA_DEBUG is on
      or for this client only when ``config.debug`` is set.
    """

    def __init__(
        self,
        config: Optional[ChapaConfig] = None,
        *,
        secret_key: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = _resolve_config(config, secret_key)
        self.log = debug_log(self.config.debug)
        self._owns_http = http_client is None
        self._client = http_client or httpx.Client(timeout=self.config.timeout, transport=transport)
        self._init_resources()
        self.log("Client init", {"api_url": self.config.api_url, "timeout": self.config.timeout})

    # ------------ context manager support ------------
    def __enter__(self) -> "ChapaClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send(self, prepared: PreparedRequest) -> ChapaResponse:
        url = self._url(prepared)
        self.log("HTTP send", {"method": prepared.method, "url": url})
        try:
            r = self._client.request(
                prepared.method,
                url,
                params=prepared.params or None,
                headers=prepared.headers,
                content=prepared.content,
            )
        except httpx.HTTPError as e:
            raise self._transport_error(prepared, e) from e
        return self._map(prepared, r)

    def close(self) -> None:
        self.log("Client close()")
        if self._owns_http:
            self._client.close()


class AsyncChapaClient(_BaseClient):
    """
    Async twin of :class:`ChapaClient` built on ``httpx.AsyncClient``.

    ``await client.verify_transaction("tx-1")``; validation errors are raised
    at call time, transport/remote/decode errors when awaited.
    """

    def __init__(
        self,
        config: Optional[ChapaConfig] = None,
        *,
        secret_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = _resolve_config(config, secret_key)
        self.log = debug_log(self.config.debug)
        self._owns_http = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.config.timeout, transport=transport)
        self._init_resources()
        self.log("AsyncClient init", {"api_url": self.config.api_url, "timeout": self.config.timeout})

    async def __aenter__(self) -> "AsyncChapaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def send(self, prepared: PreparedRequest) -> ChapaResponse:
        url = self._url(prepared)
        self.log("HTTP send", {"method": prepared.method, "url": url})
        try:
            r = await self._client.request(
                prepared.method,
                url,
                params=prepared.params or None,
                headers=prepared.headers,
                content=prepared.content,
            )
        except httpx.HTTPError as e:
            raise self._transport_error(prepared, e) from e
        return self._map(prepared, r)

    async def aclose(self) -> None:
        self.log("AsyncClient aclose()")
        if self._owns_http:
            await self._client.aclose()


__all__ = ["ChapaClient", "AsyncChapaClient"]
