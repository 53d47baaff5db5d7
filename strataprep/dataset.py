"""Loading of the tabular input file."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from .errors import InvalidDataError

logger = logging.getLogger(__name__)


def load_dataset(path: str | Path) -> pd.DataFrame:
    """Read a comma-delimited file into a DataFrame.

    Empty fields become missing values.

    Raises:
        InvalidDataError: If the file does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise InvalidDataError(f"Dataset file not found: {path}")

    try:
        data = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise InvalidDataError(f"Could not parse {path}: {e}") from e

    logger.info(f"Loaded {len(data)} rows, {len(data.columns)} columns from {path}")
    return data
