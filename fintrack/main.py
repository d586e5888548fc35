"""Main entry point for the finance tracker"""

import argparse
import json
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables FIRST, before any other imports
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

from fintrack.constants import ALL_CATEGORIES
from fintrack.demo.csv_loader import load_transactions_csv
from fintrack.ledger.session import FinanceSession
from fintrack.utils.config_loader import load_config
from fintrack.utils.errors import FinanceTrackerError
from fintrack.utils.logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fintrack", description="Personal finance tracker")
    parser.add_argument("--config", help="Path to settings.yaml")
    commands = parser.add_subparsers(dest="command", required=True)

    summary = commands.add_parser("summary", help="Totals and breakdown for a CSV of transactions")
    summary.add_argument("--csv", help="Transactions CSV (defaults to the bundled sample)")
    summary.add_argument("--category", default=ALL_CATEGORIES, help="Only list this category")

    suggest = commands.add_parser("suggest", help="Ask the model for a category")
    suggest.add_argument("description")

    convert = commands.add_parser("convert", help="Advisory currency conversion")
    convert.add_argument("amount", type=float)
    convert.add_argument("from_currency")
    convert.add_argument("to_currency")

    return parser


def run_summary(session: FinanceSession, csv_path, category: str) -> dict:
    session.store.load(load_transactions_csv(csv_path))
    totals = session.totals()
    return {
        "totals": totals.model_dump(mode="json"),
        "expense_by_category": {name: str(value) for name, value in session.expense_by_category().items()},
        "transactions": [
            t.model_dump(mode="json") for t in session.visible_transactions(category)
        ],
    }


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        session = FinanceSession.from_config(load_config(args.config))

        if args.command == "summary":
            output = run_summary(session, args.csv, args.category)
        elif args.command == "suggest":
            output = session.gateway.suggest_category(args.description).model_dump()
        else:
            conversion = session.gateway.convert_currency(args.amount, args.from_currency, args.to_currency)
            output = conversion.model_dump(by_alias=True)

    except FinanceTrackerError as e:
        logger.error(f"{args.command} failed: {e}")
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
