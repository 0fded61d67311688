"""Command-line demo runner for Tycoon Engine."""

from __future__ import annotations

import argparse
import logging

from tycoon.finance import Finance


def _cli() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a minimal Tycoon Engine loan demo.")
    p.add_argument("--bank", default="city_bank", help="Bank id")
    p.add_argument("--loan-type", default="quick_loan", help="Loan type id")
    p.add_argument("--amount", type=float, default=100_000.0, help="Principal")
    p.add_argument("--months", type=int, default=12, help="Duration in months")
    p.add_argument("--income", type=float, default=0.0, help="Income per EMI period")
    p.add_argument("--config", default=None, help="Optional YAML config")
    return p.parse_args()


def main() -> None:
    args = _cli()

    log = logging.getLogger(__name__)

    fin = Finance.init(config=args.config)
    quote = fin.quote(args.bank, args.loan_type, args.amount, args.months)
    if quote is None:
        raise SystemExit(f"Unknown product {args.bank}/{args.loan_type}")

    result = fin.take_loan(
        args.bank, args.loan_type, args.amount, quote.interest_rate, args.months
    )
    log.info("Origination: %s", result)

    interval = fin.config.emi_interval
    for month in range(1, args.months + 1):
        if fin.active_loan is None:
            break
        fin.game.balance += args.income
        fin.step(interval)  # timer reaches the interval
        fin.step(0.0)  # installment collected
        for ev in fin.drain_events():
            log.info("=== MONTH %d === %s", month, ev)

    log.info("Finished: %r", fin)


if __name__ == "__main__":
    main()
