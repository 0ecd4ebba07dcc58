"""
Result table export: original decision table plus score and rank columns.
"""
import pandas as pd
from pathlib import Path
from typing import List, Optional, Union

from ..core.config import ExportConfig
from ..core.logging_utils import get_logger
from ..data_io.loader import DecisionTable
from ..decision.topsis import RankResult


def build_result_table(
    table: DecisionTable,
    results: List[RankResult],
    config: Optional[ExportConfig] = None
) -> pd.DataFrame:
    """
    Append score and rank columns to the original decision table.

    Args:
        table: Decision table the results were computed from
        results: Engine output, one entry per table row
        config: Export configuration (column names)

    Returns:
        DataFrame with the original columns followed by score and rank,
        rows in input order
    """
    config = config or ExportConfig()

    if len(results) != table.n_alternatives:
        raise ValueError(
            f"Got {len(results)} results for {table.n_alternatives} alternatives"
        )

    by_index = sorted(results, key=lambda r: r.index)
    if [r.index for r in by_index] != list(range(table.n_alternatives)):
        raise ValueError("Result indices do not match the decision table rows")

    result_df = table.frame.copy().reset_index(drop=True)
    result_df[config.score_column] = [r.score for r in by_index]
    result_df[config.rank_column] = [r.rank for r in by_index]
    return result_df


def _formatted(result_df: pd.DataFrame, config: ExportConfig) -> pd.DataFrame:
    out = result_df.copy()
    out[config.score_column] = out[config.score_column].map(
        lambda s: f"{s:.{config.score_decimals}f}"
    )
    return out


def result_table_to_csv(
    result_df: pd.DataFrame,
    config: Optional[ExportConfig] = None
) -> str:
    """Render the result table as CSV text with fixed-decimal scores."""
    config = config or ExportConfig()
    return _formatted(result_df, config).to_csv(index=False, lineterminator='\n')


def save_result_table(
    result_df: pd.DataFrame,
    path: Union[str, Path],
    config: Optional[ExportConfig] = None
) -> Path:
    """Write the result table to a CSV file."""
    logger = get_logger(__name__)
    config = config or ExportConfig()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(result_table_to_csv(result_df, config))

    logger.info(f"Saved result table: {path}")
    return path
