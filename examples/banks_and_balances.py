from __future__ import annotations
import argparse
from _common import add_common_args, make_client_from_args, pretty

def main():
    ap = argparse.ArgumentParser(description="List supported banks and wallet balances")
    add_common_args(ap)
    ap.add_argument("--currency", default=None, help="Only this currency's balance")
    args = ap.parse_args()

    with make_client_from_args(args) as client:
        for bank in client.list_banks().data:
            print(f"{bank.id:>4}  {bank.name}")
        balances = client.get_balance(args.currency) if args.currency else client.get_balances()
        print(pretty(balances))

if __name__ == "__main__":
    main()
