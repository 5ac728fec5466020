from __future__ import annotations
import argparse
from _common import add_common_args, make_client_from_args, pretty
from chapa import generate_tx_ref
from chapa.errors import ChapaAPIError

def main():
    ap = argparse.ArgumentParser(description="Send a payout, then verify it")
    add_common_args(ap)
    ap.add_argument("--account-number", required=True)
    ap.add_argument("--account-name", default=None)
    ap.add_argument("--bank-code", type=int, required=True, help="Bank id from list_banks()")
    ap.add_argument("--amount", required=True)
    ap.add_argument("--currency", default="ETB")
    args = ap.parse_args()

    reference = generate_tx_ref(prefix="PO-")
    with make_client_from_args(args) as client:
        try:
            created = client.transfer(
                account_number=args.account_number,
                account_name=args.account_name,
                bank_code=args.bank_code,
                amount=args.amount,
                currency=args.currency,
                reference=reference,
            )
            print(f"[TRANSFER] queued ref={created.data}")
            print(pretty(client.verify_transfer(reference)))
        except ChapaAPIError as e:
            print(f"[TRANSFER] {e} retryable={e.retryable}")

if __name__ == "__main__":
    main()
