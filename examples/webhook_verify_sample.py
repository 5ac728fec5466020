from __future__ import annotations
import argparse
import json
from chapa import WebhookRouter, verify_and_parse
from chapa.resources.webhooks import sign_body
from chapa.errors import ChapaWebhookError

router = WebhookRouter()

@router.on("charge.success")
def _paid(event):
    return f"paid {event.tx_ref} {event.amount} {event.currency}"

@router.on("*")
def _log(event):
    return f"seen {event.event}"

def main():
    ap = argparse.ArgumentParser(description="Verify and dispatch a sample Chapa webhook locally")
    ap.add_argument("--secret", required=True, help="Webhook secret from the dashboard")
    args = ap.parse_args()

    body = json.dumps({
        "event": "charge.success",
        "tx_ref": "sample-tx-1",
        "amount": "100.00",
        "currency": "ETB",
        "status": "success",
    }).encode("utf-8")
    headers = {"x-chapa-signature": sign_body(body, args.secret)}

    try:
        info, event = verify_and_parse(body=body, headers=headers, secret=args.secret)
    except ChapaWebhookError as e:
        print(f"[WEBHOOK] rejected: {e}")
        return
    print(f"[WEBHOOK] {info}")
    for line in router.dispatch(event):
        print(line)

if __name__ == "__main__":
    main()
