"""
Decision making module: the TOPSIS ranking engine with sensitivity analysis.
"""
from .errors import (
    ValidationError,
    ShapeMismatchError,
    InvalidWeightError,
    InvalidImpactError,
    NonNumericEntryError
)
from .topsis import (
    Impact,
    RankResult,
    TopsisArtifacts,
    parse_impact,
    validate_inputs,
    normalize_weights,
    row_norms,
    normalize_matrix,
    ideal_points,
    closeness_scores,
    assign_ranks,
    compute_topsis,
    rank,
    topsis
)
from .sensitivity import (
    weight_sensitivity,
    criterion_removal_sensitivity,
    compute_rank_stability_score
)

__all__ = [
    # Errors
    'ValidationError',
    'ShapeMismatchError',
    'InvalidWeightError',
    'InvalidImpactError',
    'NonNumericEntryError',
    # Engine
    'Impact',
    'RankResult',
    'TopsisArtifacts',
    'parse_impact',
    'validate_inputs',
    'normalize_weights',
    'row_norms',
    'normalize_matrix',
    'ideal_points',
    'closeness_scores',
    'assign_ranks',
    'compute_topsis',
    'rank',
    'topsis',
    # Sensitivity analysis
    'weight_sensitivity',
    'criterion_removal_sensitivity',
    'compute_rank_stability_score'
]
