"""
Tests for chapa.request: option coercion, encoding, path and header building.

Nothing here touches a transport.
"""

import itertools
import json
import random
from datetime import datetime

import pytest

from chapa.config import ChapaConfig
from chapa.endpoints import (
    CREATE_SUBACCOUNT,
    CREATE_VIRTUAL_ACCOUNT,
    ENDPOINTS,
    INITIALIZE_TRANSACTION,
    LIST_TRANSACTIONS,
    REFUND,
    SWAP_CURRENCY,
    TRANSFER,
    VERIFY_TRANSACTION,
)
from chapa.errors import ChapaConfigError, ChapaValidationError
from chapa.models import InitializeOptions, SwapOptions, TransferOptions
from chapa.request import (
    build_headers,
    build_request,
    coerce_options,
    flatten_form,
    merge_options,
    render_path,
)

from conftest import SECRET

REQUIRED = {"amount": "100", "currency": "ETB", "tx_ref": "tx-1"}
OPTIONAL = {
    "email": "abebe@bikila.com",
    "first_name": "Abebe",
    "last_name": "Bikila",
    "phone_number": "0912345678",
    "callback_url": "https://example.com/callback",
    "return_url": "https://example.com/return",
}


class TestExactFields:
    """Only populated fields reach the wire, whichever subset is set."""

    @pytest.mark.parametrize("seed", range(25))
    def test_random_optional_subsets(self, config, seed):
        rng = random.Random(seed)
        chosen = {k: v for k, v in OPTIONAL.items() if rng.random() < 0.5}
        prepared = build_request(config, INITIALIZE_TRANSACTION, {**REQUIRED, **chosen})
        assert prepared.decoded_body() == {**REQUIRED, **chosen}

    def test_every_subset_of_transfer_options(self, config):
        optional = {"account_name": "Israel Goytom", "currency": "ETB", "reference": "po-1"}
        base = {"account_number": "0123456789", "amount": "25", "bank_code": 656}
        for n in range(len(optional) + 1):
            for keys in itertools.combinations(optional, n):
                subset = {k: optional[k] for k in keys}
                body = build_request(config, TRANSFER, {**base, **subset}).decoded_body()
                assert body == {**base, **subset}

    @pytest.mark.parametrize("split_value", [25, 0.02, "0.10", "25"])
    def test_split_value_sent_as_given(self, config, split_value):
        options = {
            "business_name": "Abebe Souq",
            "account_name": "Abebe Bikila",
            "bank_code": 128,
            "account_number": "0123456789",
            "split_type": "flat",
            "split_value": split_value,
        }
        assert build_request(config, CREATE_SUBACCOUNT, options).decoded_body() == options

    def test_expires_at_string_untouched(self, config):
        options = {"account_name": "Abebe", "currency": "ETB", "reference": "va-1", "expires_at": "2025-12-31"}
        assert build_request(config, CREATE_VIRTUAL_ACCOUNT, options).decoded_body() == options

    def test_expires_at_datetime_is_iso(self, config):
        options = {"account_name": "Abebe", "currency": "ETB", "reference": "va-1", "expires_at": datetime(2025, 12, 31, 23, 59)}
        body = build_request(config, CREATE_VIRTUAL_ACCOUNT, options).decoded_body()
        assert body["expires_at"] == "2025-12-31T23:59:00"

    def test_percentage_split_range_still_checked(self, config):
        options = {
            "business_name": "x", "account_name": "y", "bank_code": 1, "account_number": "1",
            "split_type": "percentage", "split_value": "1.5",
        }
        with pytest.raises(ChapaValidationError):
            build_request(config, CREATE_SUBACCOUNT, options)


class TestEncoding:
    def test_form_flattens_nested_values(self, config):
        options = {
            **REQUIRED,
            "customization": {"title": "Shop", "description": "Thanks"},
            "meta": {"order": 42, "hide_receipt": True},
            "subaccounts": [{"id": "sub-1", "split_type": "flat", "split_value": 25}],
        }
        prepared = build_request(config, INITIALIZE_TRANSACTION, options)
        body = prepared.decoded_body()
        assert prepared.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert body["customization[title]"] == "Shop"
        assert body["customization[description]"] == "Thanks"
        assert body["meta[order]"] == "42"
        assert body["meta[hide_receipt]"] == "true"
        assert body["subaccounts[0][id]"] == "sub-1"
        assert body["subaccounts[0][split_type]"] == "flat"
        assert body["subaccounts[0][split_value]"] == "25"

    def test_json_is_compact_utf8(self, config):
        prepared = build_request(
            config, TRANSFER,
            {"account_number": "0123", "amount": 10, "bank_code": 1, "account_name": "ሰላም"},
        )
        assert prepared.headers["Content-Type"] == "application/json"
        assert b" " not in prepared.content
        assert json.loads(prepared.content.decode("utf-8"))["account_name"] == "ሰላም"

    def test_swap_uses_wire_aliases(self, config):
        body = build_request(config, SWAP_CURRENCY, {"amount": "10", "from": "usd", "to": "etb"}).decoded_body()
        assert body == {"amount": "10", "from": "USD", "to": "ETB"}
        by_name = build_request(
            config, SWAP_CURRENCY, {"amount": "10", "from_currency": "USD", "to_currency": "ETB"}
        ).decoded_body()
        assert by_name == body

    def test_flatten_form_skips_none(self):
        assert flatten_form({"a": None, "b": {"c": None, "d": 1}}) == [("b[d]", "1")]

    def test_secret_never_in_body(self, config):
        prepared = build_request(config, INITIALIZE_TRANSACTION, REQUIRED)
        assert SECRET.encode() not in prepared.content


class TestOptions:
    def test_missing_required_field_is_named(self, config):
        with pytest.raises(ChapaValidationError) as ei:
            build_request(config, INITIALIZE_TRANSACTION, {"amount": "10", "currency": "ETB"})
        assert ei.value.field == "tx_ref"

    def test_unknown_field_rejected(self, config):
        with pytest.raises(ChapaValidationError) as ei:
            build_request(config, INITIALIZE_TRANSACTION, {**REQUIRED, "amuont": "5"})
        assert ei.value.field == "amuont"

    def test_bad_amount(self, config):
        with pytest.raises(ChapaValidationError) as ei:
            build_request(config, INITIALIZE_TRANSACTION, {**REQUIRED, "amount": "-1"})
        assert ei.value.field == "amount"

    def test_options_required_for_body_endpoints(self, config):
        with pytest.raises(ChapaValidationError):
            build_request(config, INITIALIZE_TRANSACTION, None)

    def test_bodyless_endpoint_rejects_options(self, config):
        with pytest.raises(ChapaValidationError):
            build_request(config, LIST_TRANSACTIONS, {"page": 1})

    def test_model_instance_passes_through(self):
        opts = InitializeOptions(**REQUIRED)
        assert coerce_options(InitializeOptions, opts) is opts

    def test_other_model_is_converted(self):
        transfer = TransferOptions(account_number="1", amount="5", bank_code=2)
        with pytest.raises(ChapaValidationError):
            coerce_options(InitializeOptions, transfer)

    def test_merge_options(self):
        assert merge_options(None, {}) is None
        assert merge_options({"a": 1}, {"b": 2}) == {"a": 1, "b": 2}
        assert merge_options({"a": 1}, {"a": 3}) == {"a": 3}
        merged = merge_options(InitializeOptions(**REQUIRED), {"email": "x@y.z"})
        assert merged == {**REQUIRED, "email": "x@y.z"}
        with pytest.raises(ChapaValidationError):
            merge_options(["nope"], {"a": 1})

    def test_merge_options_uses_field_aliases(self, config):
        swap = SwapOptions(amount="10", from_currency="USD", to_currency="ETB")
        merged = merge_options(swap, {"from_currency": "EUR"})
        assert merged == {"amount": "10", "from": "EUR", "to": "ETB"}
        assert merge_options({"amount": "10", "from": "USD", "to": "ETB"}, {"to_currency": "EUR"}, SwapOptions) == {
            "amount": "10", "from": "USD", "to": "EUR",
        }
        assert build_request(config, SWAP_CURRENCY, merged).decoded_body() == merged

    def test_empty_refund_body(self, config):
        prepared = build_request(config, REFUND, {}, path_params={"tx_ref": "tx-9"})
        assert prepared.content == b""
        assert prepared.decoded_body() == {}


class TestPaths:
    def test_verbatim_substitution(self, config):
        prepared = build_request(config, VERIFY_TRANSACTION, path_params={"tx_ref": "mail_order_injera"})
        assert prepared.path == "/transaction/verify/mail_order_injera"
        assert prepared.method == "GET"
        assert prepared.content is None
        assert "Content-Type" not in prepared.headers

    @pytest.mark.parametrize("value", ["", "   ", None, "a/b", ".", "..", " .. "])
    def test_bad_path_values(self, value):
        with pytest.raises(ChapaValidationError) as ei:
            render_path(VERIFY_TRANSACTION, {"tx_ref": value})
        assert ei.value.field == "tx_ref"

    @pytest.mark.parametrize("value, expected", [
        ("abc?status=x", "/transaction/verify/abc%3Fstatus%3Dx"),
        ("abc#frag", "/transaction/verify/abc%23frag"),
        ("50%off", "/transaction/verify/50%25off"),
        ("a b", "/transaction/verify/a%20b"),
        ("tx-1.2_~", "/transaction/verify/tx-1.2_~"),
    ])
    def test_reserved_characters_are_escaped(self, value, expected):
        assert render_path(VERIFY_TRANSACTION, {"tx_ref": value}) == expected

    def test_every_template_declares_its_params(self):
        for endpoint in ENDPOINTS.values():
            values = {name: "x" for name in endpoint.path_params}
            assert "{" not in render_path(endpoint, values)

    def test_query_drops_none(self, config):
        prepared = build_request(config, LIST_TRANSACTIONS, params={"page": 2, "per_page": None})
        assert prepared.params == {"page": "2"}


class TestHeaders:
    def test_auth_and_defaults(self):
        cfg = ChapaConfig(
            secret_key=SECRET,
            default_headers={"X-Trace": "abc", "Authorization": "Bearer other"},
        )
        h = build_headers(cfg, content_type="application/json")
        assert h["Authorization"] == f"Bearer {SECRET}"
        assert h["Accept"] == "application/json"
        assert h["Content-Type"] == "application/json"
        assert h["User-Agent"].startswith("chapa-python/")
        assert h["X-Trace"] == "abc"

    def test_missing_key_fails_before_building(self):
        with pytest.raises(ChapaConfigError):
            build_request(ChapaConfig(), VERIFY_TRANSACTION, path_params={"tx_ref": "x"})
