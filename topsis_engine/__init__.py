"""
TOPSIS Ranking Engine
=====================

Multi-criteria ranking of alternatives with TOPSIS (Technique for Order
Preference by Similarity to Ideal Solution):
- Validated, deterministic scoring and ranking of a decision matrix
- CSV ingestion of decision tables, weight and impact strings
- Result table export and ranking plots
- Weight and criterion-removal sensitivity analysis

Modules:
    core: Configuration, logging and utilities
    data_io: Decision table loading and parsing
    decision: TOPSIS engine, validation errors, sensitivity analysis
    reporting: Result export and plotting
"""

__version__ = "1.0.0"

from . import core
from . import data_io
from . import decision
from .decision import (
    Impact,
    RankResult,
    ValidationError,
    ShapeMismatchError,
    InvalidWeightError,
    InvalidImpactError,
    NonNumericEntryError,
    rank
)
