"""
Tests for chapa.resources.webhooks: signatures, parsing and routing.
"""

import hashlib
import hmac
import json

import pytest

from chapa.errors import ChapaWebhookError, ErrorKind
from chapa.resources.webhooks import (
    WebhookRouter,
    parse_event,
    sign_body,
    sign_secret,
    verify_and_parse,
    verify_signature,
)

SECRET = "whsec-chapa-test"
BODY = json.dumps({
    "event": "charge.success",
    "first_name": "Abebe",
    "last_name": "Bikila",
    "email": "abebe@bikila.com",
    "mobile": None,
    "currency": "ETB",
    "amount": "100.00",
    "charge": "3.50",
    "status": "success",
    "mode": "test",
    "reference": "AP634JFwYBwF",
    "created_at": "2024-01-24T14:07:29.000000Z",
    "type": "API",
    "tx_ref": "chewatatest-6669",
}).encode("utf-8")


class TestSignatures:
    def test_body_signature(self):
        expected = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()
        assert sign_body(BODY, SECRET) == expected
        info = verify_signature(payload=BODY, headers={"X-Chapa-Signature": expected}, secret=SECRET)
        assert info == {"ok": True, "header": "x-chapa-signature", "reason": "verified"}

    def test_secret_signature(self):
        expected = hmac.new(SECRET.encode(), SECRET.encode(), hashlib.sha256).hexdigest()
        assert sign_secret(SECRET) == expected
        info = verify_signature(payload=BODY, headers={"Chapa-Signature": expected}, secret=SECRET)
        assert info["header"] == "chapa-signature"

    def test_str_payload_matches_bytes(self):
        sig = sign_body(BODY, SECRET)
        verify_signature(payload=BODY.decode("utf-8"), headers={"x-chapa-signature": sig}, secret=SECRET)

    def test_tampered_body(self):
        sig = sign_body(BODY, SECRET)
        with pytest.raises(ChapaWebhookError) as ei:
            verify_signature(payload=BODY + b" ", headers={"x-chapa-signature": sig}, secret=SECRET)
        assert ei.value.kind is ErrorKind.WEBHOOK

    def test_wrong_secret(self):
        with pytest.raises(ChapaWebhookError):
            verify_signature(payload=BODY, headers={"chapa-signature": sign_secret("other")}, secret=SECRET)

    def test_body_signature_preferred(self):
        # a valid secret signature does not rescue a bad body signature
        headers = {"x-chapa-signature": "00" * 32, "chapa-signature": sign_secret(SECRET)}
        with pytest.raises(ChapaWebhookError):
            verify_signature(payload=BODY, headers=headers, secret=SECRET)

    def test_missing_header(self):
        with pytest.raises(ChapaWebhookError):
            verify_signature(payload=BODY, headers={}, secret=SECRET)

    def test_missing_secret(self):
        with pytest.raises(ChapaWebhookError):
            verify_signature(payload=BODY, headers={"chapa-signature": "x"}, secret=None)

    def test_skip_verification(self):
        assert verify_signature(payload=BODY, headers={}, secret=None, skip_verification=True) == {"skipped": True}


class TestParsing:
    def test_parse_event(self):
        ev = parse_event(BODY)
        assert ev.event == "charge.success"
        assert ev.tx_ref == "chewatatest-6669"
        assert ev.amount == "100.00"
        assert ev.data["first_name"] == "Abebe"

    def test_invalid_json(self):
        with pytest.raises(ChapaWebhookError):
            parse_event(b"not json")

    def test_non_object(self):
        with pytest.raises(ChapaWebhookError):
            parse_event("[1, 2]")

    def test_verify_and_parse(self):
        info, ev = verify_and_parse(body=BODY, headers={"x-chapa-signature": sign_body(BODY, SECRET)}, secret=SECRET)
        assert info["ok"] is True
        assert ev.reference == "AP634JFwYBwF"

    def test_verify_and_parse_rejects_before_parsing(self):
        with pytest.raises(ChapaWebhookError):
            verify_and_parse(body=b"not json", headers={"x-chapa-signature": "bad"}, secret=SECRET)


class TestRouter:
    def test_dispatch_by_event_name(self):
        router = WebhookRouter()
        seen = []

        @router.on("charge.success")
        def _paid(ev):
            seen.append(("paid", ev.tx_ref))
            return "paid"

        @router.on("*")
        def _all(ev):
            seen.append(("all", ev.event))
            return "all"

        router.add("payout.success", lambda ev: "payout")

        assert router.dispatch(parse_event(BODY)) == ["paid", "all"]
        assert seen == [("paid", "chewatatest-6669"), ("all", "charge.success")]

    def test_unnamed_event_hits_wildcard_only(self):
        router = WebhookRouter()
        router.add("charge.success", lambda ev: "paid")
        router.add("*", lambda ev: "all")
        assert router.dispatch(parse_event(b'{"tx_ref": "x"}')) == ["all"]

    def test_handler_errors_propagate(self):
        router = WebhookRouter()

        @router.on("charge.success")
        def _boom(ev):
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError):
            router.dispatch(parse_event(BODY))

    def test_on_requires_name(self):
        with pytest.raises(ValueError):
            WebhookRouter().on("")
