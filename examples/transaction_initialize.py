from __future__ import annotations
import argparse
from _common import add_common_args, make_client_from_args, pretty
from chapa import generate_tx_ref
from chapa.errors import ChapaAPIError

def main():
    ap = argparse.ArgumentParser(description="Start a hosted checkout and print the checkout URL")
    add_common_args(ap)
    ap.add_argument("--amount", required=True, help="Amount, e.g. 100 or 12.50")
    ap.add_argument("--currency", default="ETB")
    ap.add_argument("--email", default=None)
    ap.add_argument("--first-name", default=None)
    ap.add_argument("--last-name", default=None)
    ap.add_argument("--callback-url", default=None)
    ap.add_argument("--return-url", default=None)
    ap.add_argument("--tx-ref", default=None, help="Defaults to a generated reference")
    args = ap.parse_args()

    tx_ref = args.tx_ref or generate_tx_ref()
    with make_client_from_args(args) as client:
        try:
            resp = client.initialize_transaction(
                amount=args.amount,
                currency=args.currency,
                tx_ref=tx_ref,
                email=args.email,
                first_name=args.first_name,
                last_name=args.last_name,
                callback_url=args.callback_url,
                return_url=args.return_url,
            )
            print(f"[INIT] tx_ref={tx_ref}")
            print(pretty(resp))
        except ChapaAPIError as e:
            print(f"[INIT] {e}")
            print(pretty(e.to_dict()))

if __name__ == "__main__":
    main()
