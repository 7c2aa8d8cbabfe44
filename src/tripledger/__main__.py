from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Optional, Sequence

from tripledger.config import get_settings
from tripledger.errors import LedgerError
from tripledger.logging import configure_logging, get_logger
from tripledger.models import build_expenses
from tripledger.services.summary import compute_settlement_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tripledger", description="Compute balances and settlements for a trip")
    parser.add_argument("expenses", help="JSON file with a list of expenses, '-' for stdin")
    parser.add_argument("--base-currency", default=None, help="defaults to LEDGER_BASE_CURRENCY")
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="reject expenses whose shares don't add up (defaults to LEDGER_STRICT_SHARES)",
    )
    return parser


def load_rows(path: str) -> list:
    if path == "-":
        rows = json.load(sys.stdin)
    else:
        with open(path, encoding="utf-8") as handle:
            rows = json.load(handle)
    if not isinstance(rows, list):
        raise TypeError("expected a JSON list of expenses")
    return rows


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    log = get_logger(__name__)

    base_currency = (args.base_currency or get_settings().base_currency).upper()
    try:
        expenses = build_expenses(load_rows(args.expenses))
        summary = compute_settlement_summary(expenses, base_currency, strict=args.strict)
    except (OSError, json.JSONDecodeError) as exc:
        log.error("summary.failed", path=args.expenses, error=str(exc))
        return 1
    except (LedgerError, KeyError, TypeError, AttributeError) as exc:
        log.error("summary.failed", error=str(exc))
        return 1

    json.dump(asdict(summary), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
