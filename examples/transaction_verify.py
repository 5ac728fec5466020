from __future__ import annotations
import argparse
from _common import add_common_args, make_client_from_args, pretty
from chapa.errors import ChapaAPIError

def main():
    ap = argparse.ArgumentParser(description="Verify a transaction by tx_ref")
    add_common_args(ap)
    ap.add_argument("--tx-ref", required=True)
    args = ap.parse_args()

    with make_client_from_args(args) as client:
        try:
            resp = client.verify_transaction(args.tx_ref)
            print(f"[VERIFY] status={resp.data.status} amount={resp.data.amount} {resp.data.currency}")
            print(pretty(resp))
        except ChapaAPIError as e:
            print(f"[VERIFY] {e}")

if __name__ == "__main__":
    main()
