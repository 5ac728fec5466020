from __future__ import annotations
import argparse, json
from typing import Any
from chapa import ChapaConfig, ChapaClient
from chapa.debug import dprint

def add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--base-url", default=None, help="Override CHAPA_BASE_URL")
    p.add_argument("--secret-key", default=None, help="Override CHAPA_SECRET_KEY")
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout seconds")
    p.add_argument("--debug", type=int, default=None, help="Set debug 1/0 (overrides CHAPA_DEBUG)")

def make_client_from_args(args) -> ChapaClient:
    cfg = ChapaConfig(
        secret_key=args.secret_key,
        base_url=args.base_url,
        timeout=args.timeout,
        debug=(None if args.debug is None else bool(args.debug)),
    )
    dprint("[COMMON] Config", cfg.masked())
    return ChapaClient(cfg.validate())

def pretty(obj: Any) -> str:
    if hasattr(obj, "model_dump"):
        obj = obj.model_dump(mode="json", by_alias=True)
    return json.dumps(obj, ensure_ascii=False, indent=2)
