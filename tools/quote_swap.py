#!/usr/bin/env python3
"""
Quote an exact-input swap against a freshly initialised virtual pool.

The pool config comes from --config or $VIRTUAL_CURVE_CONFIG. The quote is
printed as JSON; integers that may exceed 2**53 are emitted as strings.

Exit codes: 0 ok, 1 quote rejected, 2 bad invocation or config.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from virtual_curve.core.liquidity import create_virtual_pool, liquidity_from_base_supply
from virtual_curve.core.quote import fee_mint_for, quote_exact_in
from virtual_curve.errors import InvalidInputError, VirtualCurveError
from virtual_curve.integration.config_loader import load_pool_config, log_level_from_env


logger = logging.getLogger("virtual_curve.tools.quote_swap")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Quote an exact-input swap on a single-range virtual curve.")
    ap.add_argument("--config", type=str, default="", help="pool config YAML (default: $VIRTUAL_CURVE_CONFIG)")
    ap.add_argument("--base-mint", type=str, default="base")
    size = ap.add_mutually_exclusive_group(required=True)
    size.add_argument("--liquidity", type=int, help="pool liquidity (Q64.64 scaled)")
    size.add_argument("--base-supply", type=int, help="size liquidity from a base supply over the full range")
    ap.add_argument("--sqrt-price", type=int, default=None, help="starting sqrt price (default: sqrt_min_price)")
    ap.add_argument("--amount-in", type=int, required=True)
    ap.add_argument("--base-for-quote", action="store_true", help="sell base for quote (default: buy base)")
    ap.add_argument("--timestamp", type=int, default=0)
    ap.add_argument("--slot", type=int, default=0)
    ap.add_argument("--activation-point", type=int, default=0)
    ap.add_argument("--referral", action="store_true")
    ap.add_argument("--log-level", type=str, default="", help="default: $VIRTUAL_CURVE_LOG_LEVEL or WARNING")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or log_level_from_env()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_pool_config(Path(args.config) if args.config else None)
        if args.liquidity is not None:
            liquidity = args.liquidity
        else:
            liquidity = liquidity_from_base_supply(config, args.base_supply)
        pool = create_virtual_pool(
            config,
            args.base_mint,
            liquidity,
            sqrt_price=args.sqrt_price,
            activation_point=args.activation_point,
            current_timestamp=args.timestamp,
        )
    except FileNotFoundError as exc:
        print(f"config not found: {exc}", file=sys.stderr)
        return 2
    except (InvalidInputError, TypeError) as exc:
        print(f"invalid config or pool: {exc}", file=sys.stderr)
        return 2
    except VirtualCurveError as exc:
        print(f"pool initialisation failed: {exc}", file=sys.stderr)
        return 2

    try:
        result = quote_exact_in(
            pool,
            config,
            args.base_for_quote,
            args.timestamp,
            args.slot,
            args.amount_in,
            args.referral,
        )
    except VirtualCurveError as exc:
        logger.info("quote rejected: %s", exc)
        print(f"quote rejected: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    out = {
        "amount_in": args.amount_in,
        "actual_input_amount": result.actual_input_amount,
        "output_amount": result.output_amount,
        "total_fee": result.total_fee,
        "protocol_fee": result.protocol_fee,
        "referral_fee": result.referral_fee,
        "trading_fee": result.trading_fee,
        "fee_mint": fee_mint_for(config, pool, args.base_for_quote, args.referral),
        "liquidity": str(liquidity),
        "sqrt_price": str(pool.sqrt_price),
        "next_sqrt_price": str(result.next_sqrt_price),
    }
    print(json.dumps(out, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
