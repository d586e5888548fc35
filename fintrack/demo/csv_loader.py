"""CSV import of transaction drafts"""

import pandas as pd
from pathlib import Path
from typing import List, Optional
from fintrack.models import TransactionDraft
from fintrack.utils.errors import ConfigurationError
from fintrack.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ['date', 'description', 'amount', 'type', 'category']

DEFAULT_SAMPLE_PATH = Path(__file__).resolve().parents[2] / "data" / "sample_transactions.csv"


def load_transactions_csv(path: Optional[str] = None, skip_invalid: bool = False) -> List[TransactionDraft]:
    """
    Read transaction drafts from a CSV file.

    Args:
        path: CSV path (defaults to data/sample_transactions.csv)
        skip_invalid: Drop rows that fail validation instead of raising

    Returns:
        Drafts in file order

    Raises:
        ConfigurationError: If the file is missing, lacks columns, or has an invalid row
    """
    csv_path = Path(path) if path else DEFAULT_SAMPLE_PATH
    if not csv_path.exists():
        raise ConfigurationError(f"Transactions file not found: {csv_path}")

    # Amounts stay strings so they become exact Decimals
    df = pd.read_csv(csv_path, dtype={'amount': str, 'description': str, 'category': str, 'type': str})
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise ConfigurationError(f"Missing columns in {csv_path.name}: {missing}")

    # Unparseable dates become NaT and are reported per row below
    df['date'] = pd.to_datetime(df['date'], errors='coerce')
    df['type'] = df['type'].str.strip().str.lower()

    drafts = []
    for row_number, row in enumerate(df[REQUIRED_COLUMNS].to_dict('records'), start=2):
        try:
            if pd.isna(row['date']):
                raise ValueError("date is missing or not a valid date")
            row['date'] = row['date'].to_pydatetime()
            drafts.append(TransactionDraft(**row))
        except ValueError as e:
            # pydantic's ValidationError is a ValueError
            if not skip_invalid:
                raise ConfigurationError(f"Invalid transaction on line {row_number} of {csv_path.name}: {e}")
            logger.warning("Skipping invalid transaction row", line=row_number, error=str(e))

    logger.info(f"Loaded {len(drafts)} transactions from {csv_path.name}")
    return drafts
