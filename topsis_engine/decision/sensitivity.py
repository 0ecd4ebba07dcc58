"""
Sensitivity analysis for TOPSIS rankings.

Provides functions to analyze ranking stability under weight perturbations
and criterion removal.
"""
import pandas as pd
from typing import Any, Dict, List, Optional, Sequence

from .topsis import rank, validate_inputs
from .errors import InvalidWeightError
from ..core.logging_utils import get_logger


def _labels_for(n_alternatives: int, labels: Optional[Sequence[str]]) -> List[str]:
    if labels is None:
        return [f"A{i + 1}" for i in range(n_alternatives)]
    labels = [str(label) for label in labels]
    if len(labels) != n_alternatives:
        raise ValueError(f"Got {len(labels)} labels for {n_alternatives} alternatives")
    return labels


def _criteria_for(n_criteria: int, criteria: Optional[Sequence[str]]) -> List[str]:
    if criteria is None:
        return [f"C{j + 1}" for j in range(n_criteria)]
    criteria = [str(c) for c in criteria]
    if len(criteria) != n_criteria:
        raise ValueError(f"Got {len(criteria)} criterion names for {n_criteria} criteria")
    return criteria


def weight_sensitivity(
    matrix: Any,
    weights: Any,
    impacts: Any,
    labels: Optional[Sequence[str]] = None,
    criteria: Optional[Sequence[str]] = None,
    perturbation: float = 0.2
) -> pd.DataFrame:
    """
    Analyze ranking sensitivity to weight perturbations.

    Tests how ranks change when each criterion weight is increased
    or decreased by the perturbation fraction, all other weights fixed.

    Args:
        matrix: Decision matrix (alternatives x criteria)
        weights: Base criteria weights
        impacts: Criteria impacts
        labels: Alternative names (defaults to A1..An)
        criteria: Criterion names (defaults to C1..Cm)
        perturbation: Fractional perturbation (0.2 = +/-20%)

    Returns:
        DataFrame with columns: criterion, perturbation, perturbation_pct,
        alternative, base_rank, new_rank, rank_change
    """
    logger = get_logger(__name__)
    logger.info(f"Running weight sensitivity analysis (perturbation={perturbation*100:g}%)")

    if not 0 < perturbation <= 1:
        raise ValueError(f"perturbation must be in (0, 1], got {perturbation}")

    data, base_weights, parsed_impacts = validate_inputs(matrix, weights, impacts)
    n_alternatives, n_criteria = data.shape
    labels = _labels_for(n_alternatives, labels)
    criteria = _criteria_for(n_criteria, criteria)

    base_ranks = [r.rank for r in rank(data, base_weights, parsed_impacts)]

    results = []
    for j, criterion in enumerate(criteria):
        for direction in ['increase', 'decrease']:
            perturbed_weights = base_weights.copy()

            if direction == 'increase':
                perturbed_weights[j] *= (1 + perturbation)
            else:
                perturbed_weights[j] *= (1 - perturbation)

            try:
                perturbed = rank(data, perturbed_weights, parsed_impacts)
            except InvalidWeightError as e:
                logger.warning(f"Skipping {criterion}/{direction}: {e}")
                continue

            for i, result in enumerate(perturbed):
                results.append({
                    'criterion': criterion,
                    'perturbation': direction,
                    'perturbation_pct': f"{'+' if direction == 'increase' else '-'}{perturbation*100:g}%",
                    'alternative': labels[i],
                    'base_rank': base_ranks[i],
                    'new_rank': result.rank,
                    'rank_change': result.rank - base_ranks[i]
                })

    result_df = pd.DataFrame(results)
    logger.info(f"Weight sensitivity complete: {len(result_df)} records")
    return result_df


def criterion_removal_sensitivity(
    matrix: Any,
    weights: Any,
    impacts: Any,
    labels: Optional[Sequence[str]] = None,
    criteria: Optional[Sequence[str]] = None
) -> pd.DataFrame:
    """
    Analyze ranking sensitivity to removing individual criteria.

    Tests rank stability by removing one criterion at a time. Removals
    that leave no criterion, or only zero-weighted ones, are skipped.

    Args:
        matrix: Decision matrix (alternatives x criteria)
        weights: Base criteria weights
        impacts: Criteria impacts
        labels: Alternative names (defaults to A1..An)
        criteria: Criterion names (defaults to C1..Cm)

    Returns:
        DataFrame with columns: removed_criterion, alternative, base_rank,
        new_rank, rank_change, rank_reversed
    """
    logger = get_logger(__name__)
    logger.info("Running criterion removal sensitivity analysis")

    data, base_weights, parsed_impacts = validate_inputs(matrix, weights, impacts)
    n_alternatives, n_criteria = data.shape
    labels = _labels_for(n_alternatives, labels)
    criteria = _criteria_for(n_criteria, criteria)

    base_ranks = [r.rank for r in rank(data, base_weights, parsed_impacts)]

    results = []
    if n_criteria < 2:
        logger.warning("Criterion removal needs at least two criteria")
        return pd.DataFrame(results)

    for j, removed_criterion in enumerate(criteria):
        keep = [k for k in range(n_criteria) if k != j]

        try:
            reduced = rank(
                data[:, keep],
                base_weights[keep],
                [parsed_impacts[k] for k in keep]
            )
        except InvalidWeightError as e:
            logger.warning(f"Skipping removal of {removed_criterion}: {e}")
            continue

        for i, result in enumerate(reduced):
            results.append({
                'removed_criterion': removed_criterion,
                'alternative': labels[i],
                'base_rank': base_ranks[i],
                'new_rank': result.rank,
                'rank_change': result.rank - base_ranks[i],
                'rank_reversed': (base_ranks[i] == 1) != (result.rank == 1)
            })

    result_df = pd.DataFrame(results)
    logger.info(f"Criterion removal sensitivity complete: {len(result_df)} records")
    return result_df


def compute_rank_stability_score(sensitivity_df: pd.DataFrame) -> Dict[str, float]:
    """
    Compute overall rank stability scores from sensitivity analysis.

    Args:
        sensitivity_df: DataFrame from weight_sensitivity() or
            criterion_removal_sensitivity()

    Returns:
        Dict mapping alternative to stability score (0-1, higher is more stable)
    """
    if 'rank_change' not in sensitivity_df.columns:
        return {}

    stability_scores = {}
    for alt in sensitivity_df['alternative'].unique():
        alt_data = sensitivity_df[sensitivity_df['alternative'] == alt]
        # Stability = proportion of scenarios with no rank change
        no_change = int((alt_data['rank_change'] == 0).sum())
        total = len(alt_data)
        stability_scores[alt] = no_change / total if total > 0 else 0.0

    return stability_scores
