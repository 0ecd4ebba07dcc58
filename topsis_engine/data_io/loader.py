"""
Decision table loading for the TOPSIS ranking engine.

A decision table is a CSV file whose first column holds the alternative
labels and whose remaining columns hold one numeric criterion each.
"""
import pandas as pd
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from ..core.config import IngestConfig
from ..core.logging_utils import get_logger


class ParseError(ValueError):
    """Malformed decision table, weight string or impact string."""

    def __init__(self, message: str, row: Optional[int] = None, column: Optional[Any] = None):
        super().__init__(message)
        self.row = row
        self.column = column


@dataclass
class DecisionTable:
    """Labels, criterion headers and numeric matrix read from a table."""
    label_header: str
    criteria: List[str]
    labels: List[str]
    matrix: np.ndarray
    frame: pd.DataFrame

    @property
    def n_alternatives(self) -> int:
        return self.matrix.shape[0]

    @property
    def n_criteria(self) -> int:
        return self.matrix.shape[1]


def load_decision_table(
    source: Union[str, Path, Any],
    config: Optional[IngestConfig] = None
) -> DecisionTable:
    """
    Load a decision table from a CSV path or file-like object.

    Args:
        source: Path to a CSV file, or an open text buffer
        config: Ingestion configuration

    Returns:
        DecisionTable with labels as strings and criteria as floats

    Raises:
        FileNotFoundError: if a path is given and does not exist
        ParseError: if the table is unreadable or malformed
    """
    logger = get_logger(__name__)
    config = config or IngestConfig()

    if isinstance(source, (str, Path)):
        source = Path(source)
        if not source.exists():
            raise FileNotFoundError(f"Decision table not found: {source}")
        logger.info(f"Loading decision table from: {source}")

    try:
        df = pd.read_csv(
            source,
            sep=config.delimiter,
            encoding=config.encoding,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True
        )
    except pd.errors.EmptyDataError as e:
        raise ParseError("Decision table is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not parse decision table: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]

    if len(df.columns) < 2:
        raise ParseError(
            f"Decision table needs a label column and at least one criterion column, "
            f"got {len(df.columns)} column(s)"
        )
    if len(df) == 0:
        raise ParseError("Decision table has no alternatives")

    label_header = df.columns[0]
    criteria = list(df.columns[1:])

    frame = pd.DataFrame(index=df.index)
    frame[label_header] = df[label_header].str.strip()

    for col in criteria:
        raw = df[col].str.strip()
        values = pd.to_numeric(raw, errors='coerce')
        bad = values.isna() | ~np.isfinite(values.astype(float))
        if bad.any():
            i = int(np.flatnonzero(bad.to_numpy())[0])
            raise ParseError(
                f"Row {i + 1}, column {col!r}: {raw.iloc[i]!r} is not a finite number",
                row=i + 1,
                column=col
            )
        frame[col] = values

    table = DecisionTable(
        label_header=label_header,
        criteria=criteria,
        labels=frame[label_header].tolist(),
        matrix=frame[criteria].to_numpy(dtype=float),
        frame=frame
    )

    logger.info(f"Loaded {table.n_alternatives} alternatives, {table.n_criteria} criteria")
    logger.info(f"Criteria: {criteria}")

    return table


def _split_list(text: str, separator: str, what: str) -> List[str]:
    if text is None or not str(text).strip():
        raise ParseError(f"No {what} given")
    tokens = [t.strip() for t in str(text).split(separator)]
    for j, token in enumerate(tokens):
        if not token:
            raise ParseError(f"Empty entry at position {j + 1} in {what}: {text!r}", column=j)
    return tokens


def parse_weights(text: str, separator: str = ",") -> List[float]:
    """
    Parse a separated weight string such as "1,2,1".

    Values are not range-checked here; the engine rejects negative or
    all-zero weights.
    """
    weights = []
    for j, token in enumerate(_split_list(text, separator, 'weights')):
        try:
            weights.append(float(token))
        except ValueError:
            raise ParseError(
                f"Weight at position {j + 1} is not a number: {token!r}",
                column=j
            ) from None
    return weights


def parse_impacts(text: str, separator: str = ",") -> List[str]:
    """
    Parse a separated impact string such as "+,-,+".

    Symbols are returned as given; the engine decides which are valid.
    """
    return _split_list(text, separator, 'impacts')
