"""
TOPSIS (Technique for Order Preference by Similarity to Ideal Solution).

Vector-normalization TOPSIS over an in-memory decision matrix of
alternatives x criteria. All functions are pure: inputs are never mutated
and nothing is kept between calls, so independent rankings may run
concurrently.

Norms are taken over values pre-divided by their largest magnitude, so any
finite input (1e-300 or 1e300 alike) normalizes without overflow or
underflow.

Degenerate inputs have defined results instead of NaN/inf:
    - a criterion column whose Euclidean norm is 0 normalizes to all zeros
      and so contributes nothing to the distances;
    - an alternative at distance 0 from both ideal points (single
      alternative, or all alternatives identical) scores 0.5.

Ties: alternatives with exactly equal scores are ranked by input position,
the earlier one getting the better (lower) rank.
"""
import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

import numpy as np
import pandas as pd

from ..core.logging_utils import get_logger
from .errors import (
    ShapeMismatchError,
    InvalidWeightError,
    InvalidImpactError,
    NonNumericEntryError
)


class Impact(str, Enum):
    """Direction of a criterion."""
    BENEFIT = '+'  # higher is better
    COST = '-'  # lower is better


_IMPACT_SYMBOLS = {
    '+': Impact.BENEFIT,
    'benefit': Impact.BENEFIT,
    '-': Impact.COST,
    'cost': Impact.COST,
}


@dataclass(frozen=True)
class RankResult:
    """Score and rank of the alternative at position `index` of the input."""
    index: int
    score: float
    rank: int


@dataclass(frozen=True)
class TopsisArtifacts:
    weights: np.ndarray            # normalized, sums to 1
    normalized_matrix: np.ndarray  # r_ij
    weighted_matrix: np.ndarray    # v_ij
    ideal_best: np.ndarray         # A+
    ideal_worst: np.ndarray        # A-
    d_best: np.ndarray             # S+
    d_worst: np.ndarray            # S-
    scores: np.ndarray             # C
    ranks: np.ndarray


def parse_impact(symbol: Any, column: int = None) -> Impact:
    """
    Map an impact symbol to an Impact.

    Accepts Impact members and the strings '+', '-', 'benefit', 'cost'
    (case-insensitive, surrounding whitespace ignored).
    """
    if isinstance(symbol, Impact):
        return symbol
    if isinstance(symbol, str):
        impact = _IMPACT_SYMBOLS.get(symbol.strip().lower())
        if impact is not None:
            return impact
    where = f" for criterion {column}" if column is not None else ""
    raise InvalidImpactError(
        f"Impact{where} must be '+' (benefit) or '-' (cost), got {symbol!r}",
        invariant='impact_symbol',
        column=column
    )


def _is_finite_real(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints and fractions beyond the float range
        return False


def _as_rows(matrix: Any) -> List[list]:
    if isinstance(matrix, pd.DataFrame):
        matrix = matrix.to_numpy()
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2:
            raise ShapeMismatchError(
                f"Decision matrix must be two-dimensional, got {matrix.ndim} dimension(s)",
                invariant='matrix_dims'
            )
        return matrix.tolist()
    if isinstance(matrix, (str, bytes)) or not isinstance(matrix, Sequence):
        raise ShapeMismatchError(
            "Decision matrix must be a sequence of rows",
            invariant='matrix_dims'
        )

    rows = []
    for i, row in enumerate(matrix):
        if isinstance(row, np.ndarray):
            row = row.tolist()
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ShapeMismatchError(
                f"Row {i} is not a sequence of criterion values",
                invariant='matrix_dims',
                row=i
            )
        rows.append(list(row))
    return rows


def _as_vector(values: Any, name: str) -> list:
    if isinstance(values, pd.Series):
        values = values.to_numpy()
    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise ShapeMismatchError(
                f"{name.capitalize()} must be one-dimensional, got {values.ndim} dimension(s)",
                invariant=f'{name}_dims'
            )
        return values.tolist()
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ShapeMismatchError(
            f"{name.capitalize()} must be a sequence with one entry per criterion",
            invariant=f'{name}_dims'
        )
    return list(values)


def validate_inputs(
    matrix: Any,
    weights: Any,
    impacts: Any
) -> Tuple[np.ndarray, np.ndarray, List[Impact]]:
    """
    Check every ranking precondition and return the inputs as arrays.

    Checks run in a fixed order and the first violation raises:
    matrix shape, matrix cells, weight/impact lengths, weight values,
    impact symbols.

    Args:
        matrix: Decision matrix (alternatives x criteria)
        weights: One non-negative weight per criterion, not all zero
        impacts: One impact symbol per criterion

    Returns:
        Tuple of (float matrix, float weights, parsed impacts)

    Raises:
        ShapeMismatchError, NonNumericEntryError, InvalidWeightError,
        InvalidImpactError
    """
    rows = _as_rows(matrix)
    if not rows:
        raise ShapeMismatchError(
            "Decision matrix has no alternatives",
            invariant='non_empty'
        )

    n_criteria = len(rows[0])
    if n_criteria == 0:
        raise ShapeMismatchError(
            "Decision matrix has no criteria",
            invariant='non_empty',
            row=0
        )
    for i, row in enumerate(rows):
        if len(row) != n_criteria:
            raise ShapeMismatchError(
                f"Row {i} has {len(row)} values, expected {n_criteria}",
                invariant='row_length',
                row=i
            )

    for i, row in enumerate(rows):
        for j, value in enumerate(row):
            if not _is_finite_real(value):
                raise NonNumericEntryError(
                    f"Entry at row {i}, criterion {j} is not a finite number: {value!r}",
                    invariant='finite_entry',
                    row=i,
                    column=j
                )

    weight_values = _as_vector(weights, 'weights')
    impact_values = _as_vector(impacts, 'impacts')

    if len(weight_values) != n_criteria:
        raise ShapeMismatchError(
            f"Got {len(weight_values)} weights for {n_criteria} criteria",
            invariant='weights_length'
        )
    if len(impact_values) != n_criteria:
        raise ShapeMismatchError(
            f"Got {len(impact_values)} impacts for {n_criteria} criteria",
            invariant='impacts_length'
        )

    for j, w in enumerate(weight_values):
        if not _is_finite_real(w) or w < 0:
            raise InvalidWeightError(
                f"Weight for criterion {j} must be a finite non-negative number, got {w!r}",
                invariant='weight_value',
                column=j
            )
    if sum(weight_values) <= 0:
        raise InvalidWeightError(
            "Weights must not all be zero",
            invariant='weight_sum'
        )

    parsed_impacts = [parse_impact(symbol, column=j) for j, symbol in enumerate(impact_values)]

    return (
        np.asarray(rows, dtype=float),
        np.asarray(weight_values, dtype=float),
        parsed_impacts
    )


def normalize_weights(weights: np.ndarray) -> np.ndarray:
    """Scale weights to sum to 1."""
    w = np.asarray(weights, dtype=float)
    # divide by the largest weight first so the sum cannot overflow
    w = w / w.max()
    return w / w.sum()


def row_norms(values: np.ndarray) -> np.ndarray:
    """Euclidean norm of each row, computed on rows scaled to max |x| = 1."""
    values = np.asarray(values, dtype=float)
    scale = np.max(np.abs(values), axis=1)
    safe = np.where(scale > 0, scale, 1.0)
    return safe * np.sqrt(np.sum((values / safe[:, None]) ** 2, axis=1))


def normalize_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Normalize decision matrix using vector normalization.

    Each column is divided by its Euclidean norm. The column is first
    divided by its largest magnitude, so the squares stay in [0, 1] and a
    varying column never reads as zero norm through underflow or overflow.
    A column of zeros normalizes to zeros.

    Args:
        matrix: Decision matrix (alternatives x criteria)

    Returns:
        Normalized matrix
    """
    logger = get_logger(__name__)
    matrix = np.asarray(matrix, dtype=float)
    norm_matrix = np.zeros_like(matrix, dtype=float)

    for j in range(matrix.shape[1]):
        col = matrix[:, j]
        scale = np.max(np.abs(col))
        if scale > 0:
            scaled = col / scale
            norm_matrix[:, j] = scaled / np.sqrt(np.sum(scaled ** 2))
        else:
            logger.debug(f"Criterion {j} has zero norm; it will not discriminate")
            norm_matrix[:, j] = 0

    return norm_matrix


def ideal_points(
    weighted_matrix: np.ndarray,
    impacts: List[Impact]
) -> Tuple[np.ndarray, np.ndarray]:
    """Ideal best and ideal worst vectors of a weighted normalized matrix."""
    n_criteria = weighted_matrix.shape[1]
    ideal_best = np.zeros(n_criteria)
    ideal_worst = np.zeros(n_criteria)

    for j, impact in enumerate(impacts):
        col = weighted_matrix[:, j]
        if impact is Impact.BENEFIT:
            ideal_best[j] = np.max(col)
            ideal_worst[j] = np.min(col)
        else:
            ideal_best[j] = np.min(col)
            ideal_worst[j] = np.max(col)

    return ideal_best, ideal_worst


def closeness_scores(d_best: np.ndarray, d_worst: np.ndarray) -> np.ndarray:
    """
    Relative closeness d_worst / (d_best + d_worst).

    Rows at distance 0 from both ideal points score 0.5.
    """
    d_best = np.asarray(d_best, dtype=float)
    d_worst = np.asarray(d_worst, dtype=float)
    total = d_best + d_worst

    scores = np.full(total.shape, 0.5)
    np.divide(d_worst, total, out=scores, where=total > 0)
    return scores


def assign_ranks(scores: np.ndarray) -> np.ndarray:
    """
    Rank scores in descending order, 1 = best.

    Equal scores are ordered by position: the earlier alternative gets the
    lower rank number, so every rank 1..n is used exactly once.
    """
    scores = np.asarray(scores, dtype=float)
    n = len(scores)
    # lexsort: last key is primary
    order = np.lexsort((np.arange(n), -scores))
    ranks = np.empty(n, dtype=int)
    ranks[order] = np.arange(1, n + 1)
    return ranks


def compute_topsis(
    matrix: Any,
    weights: Any,
    impacts: Any
) -> TopsisArtifacts:
    """
    Run TOPSIS and keep every intermediate stage.

    Args:
        matrix: Decision matrix (alternatives x criteria)
        weights: One non-negative weight per criterion; only relative
            magnitudes matter
        impacts: One impact per criterion ('+'/'benefit' or '-'/'cost')

    Returns:
        TopsisArtifacts for the ranking
    """
    logger = get_logger(__name__)
    data, raw_weights, parsed_impacts = validate_inputs(matrix, weights, impacts)
    n_alternatives, n_criteria = data.shape
    logger.debug(f"TOPSIS on {n_alternatives} alternatives x {n_criteria} criteria")

    # Step 1: Normalize weights
    w = normalize_weights(raw_weights)

    # Step 2: Normalize matrix
    norm_matrix = normalize_matrix(data)

    # Step 3: Weighted normalized matrix
    weighted_matrix = norm_matrix * w

    # Step 4: Ideal and anti-ideal solutions
    ideal_best, ideal_worst = ideal_points(weighted_matrix, parsed_impacts)

    # Step 5: Distance to ideal and anti-ideal
    d_best = row_norms(weighted_matrix - ideal_best)
    d_worst = row_norms(weighted_matrix - ideal_worst)

    # Step 6: Relative closeness (higher is better)
    scores = closeness_scores(d_best, d_worst)
    n_coincident = int(np.sum((d_best + d_worst) == 0))
    if n_coincident:
        logger.debug(f"{n_coincident} alternative(s) coincide with both ideal points; scored 0.5")

    # Step 7: Ranks
    ranks = assign_ranks(scores)

    return TopsisArtifacts(
        weights=w,
        normalized_matrix=norm_matrix,
        weighted_matrix=weighted_matrix,
        ideal_best=ideal_best,
        ideal_worst=ideal_worst,
        d_best=d_best,
        d_worst=d_worst,
        scores=scores,
        ranks=ranks,
    )


def rank(matrix: Any, weights: Any, impacts: Any) -> List[RankResult]:
    """
    Score and rank alternatives with TOPSIS.

    Args:
        matrix: Decision matrix (alternatives x criteria)
        weights: One non-negative weight per criterion, not all zero
        impacts: One impact per criterion

    Returns:
        One RankResult per row, in input order
    """
    artifacts = compute_topsis(matrix, weights, impacts)
    return [
        RankResult(index=i, score=float(score), rank=int(r))
        for i, (score, r) in enumerate(zip(artifacts.scores, artifacts.ranks))
    ]


def _by_criterion(values: Any, criteria: List[str], name: str) -> list:
    if not isinstance(values, Mapping):
        return values
    missing = [j for j, c in enumerate(criteria) if c not in values]
    if missing:
        j = missing[0]
        raise ShapeMismatchError(
            f"No {name} given for criterion {criteria[j]!r}",
            invariant=f'{name}_length',
            column=j
        )
    return [values[c] for c in criteria]


def topsis(
    df: pd.DataFrame,
    criteria: List[str],
    weights: Union[Dict[str, float], List[float]],
    impacts: Union[Dict[str, Any], List[Any]]
) -> pd.DataFrame:
    """
    TOPSIS over the criteria columns of a DataFrame.

    Args:
        df: DataFrame with alternatives and criteria columns
        criteria: List of criteria column names
        weights: Dict mapping criterion to weight, or a list aligned with criteria
        impacts: Dict mapping criterion to impact, or a list aligned with criteria

    Returns:
        Copy of df, in the same row order, with topsis_d_best,
        topsis_d_worst, topsis_score and topsis_rank columns
    """
    logger = get_logger(__name__)
    criteria = list(criteria)

    for j, c in enumerate(criteria):
        if c not in df.columns:
            raise ShapeMismatchError(
                f"Criterion column {c!r} not found",
                invariant='criterion_column',
                column=j
            )

    artifacts = compute_topsis(
        df[criteria].to_numpy(),
        _by_criterion(weights, criteria, 'weights'),
        _by_criterion(impacts, criteria, 'impacts')
    )

    result_df = df.copy()
    result_df['topsis_d_best'] = artifacts.d_best
    result_df['topsis_d_worst'] = artifacts.d_worst
    result_df['topsis_score'] = artifacts.scores
    result_df['topsis_rank'] = artifacts.ranks

    best = result_df.index[int(np.argmin(artifacts.ranks))]
    logger.debug(f"TOPSIS ranking complete. Best: {best}")

    return result_df
