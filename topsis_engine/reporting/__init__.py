"""
Reporting module: result table export and plots.
"""
from .export import (
    build_result_table,
    result_table_to_csv,
    save_result_table
)
from .plots import (
    set_plot_style,
    plot_topsis_ranking,
    plot_weight_sensitivity_heatmap
)

__all__ = [
    'build_result_table',
    'result_table_to_csv',
    'save_result_table',
    'set_plot_style',
    'plot_topsis_ranking',
    'plot_weight_sensitivity_heatmap'
]
