"""
Data I/O module for the TOPSIS ranking engine.
"""
from .loader import (
    ParseError,
    DecisionTable,
    load_decision_table,
    parse_weights,
    parse_impacts
)

__all__ = [
    'ParseError', 'DecisionTable', 'load_decision_table',
    'parse_weights', 'parse_impacts'
]
