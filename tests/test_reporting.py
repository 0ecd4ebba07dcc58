"""
Tests for result table export and plots.
"""
import io

import pytest
import pandas as pd
import matplotlib.pyplot as plt

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from topsis_engine.core import ExportConfig
from topsis_engine.data_io import load_decision_table
from topsis_engine.decision import rank, RankResult, weight_sensitivity
from topsis_engine.reporting import (
    build_result_table, result_table_to_csv, save_result_table,
    plot_topsis_ranking, plot_weight_sensitivity_heatmap
)


PHONES_CSV = (
    "Model,Price,Battery,Weight\n"
    "P1,540,9,1.3\n"
    "P2,620,7,1.1\n"
    "P3,580,8,1.5\n"
)


@pytest.fixture
def table():
    return load_decision_table(io.StringIO(PHONES_CSV))


@pytest.fixture
def results(table):
    return rank(table.matrix, [3, 2, 1], ['-', '+', '-'])


class TestResultTable:
    """Tests for building the result table."""

    def test_columns_and_order(self, table, results):
        result_df = build_result_table(table, results)

        assert list(result_df.columns) == ['Model', 'Price', 'Battery', 'Weight', 'Topsis Score', 'Rank']
        assert result_df['Model'].tolist() == ['P1', 'P2', 'P3']
        assert result_df['Rank'].tolist() == [1, 3, 2]

    def test_results_matched_by_index(self, table, results):
        shuffled = [results[2], results[0], results[1]]
        result_df = build_result_table(table, shuffled)

        assert result_df['Rank'].tolist() == [1, 3, 2]

    def test_custom_column_names(self, table, results):
        config = ExportConfig(score_column='score', rank_column='position')
        result_df = build_result_table(table, results, config)

        assert list(result_df.columns[-2:]) == ['score', 'position']

    def test_result_count_mismatch(self, table, results):
        with pytest.raises(ValueError):
            build_result_table(table, results[:2])

    def test_bad_indices(self, table):
        bogus = [RankResult(index=i, score=0.5, rank=i + 1) for i in [0, 1, 5]]
        with pytest.raises(ValueError):
            build_result_table(table, bogus)

    def test_source_frame_untouched(self, table, results):
        build_result_table(table, results)
        assert 'Topsis Score' not in table.frame.columns


class TestCsvExport:
    """Tests for CSV rendering."""

    def test_csv_text(self, table, results):
        text = result_table_to_csv(build_result_table(table, results))
        lines = text.strip().split('\n')

        assert lines[0] == 'Model,Price,Battery,Weight,Topsis Score,Rank'
        assert lines[1].startswith('P1,540,9,1.3,0.813')
        assert lines[1].endswith(',1')
        assert len(lines) == 4

    def test_score_decimals(self, table, results):
        result_df = build_result_table(table, results)

        text = result_table_to_csv(result_df, ExportConfig(score_decimals=2))
        score = text.strip().split('\n')[1].split(',')[4]
        assert score == '0.81'

    def test_single_alternative_fixed_decimals(self):
        single = load_decision_table(io.StringIO("Model,Price\nOnly,10\n"))
        result_df = build_result_table(single, rank(single.matrix, [1], ['+']))

        assert result_table_to_csv(result_df).strip().split('\n')[1] == 'Only,10,0.5000,1'

    def test_save_result_table(self, table, results, tmp_path):
        path = save_result_table(build_result_table(table, results), tmp_path / 'out' / 'result.csv')

        assert path.exists()
        saved = pd.read_csv(path)
        assert saved['Rank'].tolist() == [1, 3, 2]
        assert saved['Topsis Score'].between(0, 1).all()


class TestPlots:
    """Smoke tests for figures."""

    def test_plot_topsis_ranking(self, table, results, tmp_path):
        result_df = build_result_table(table, results)
        output_path = tmp_path / 'ranking.png'

        fig = plot_topsis_ranking(result_df, output_path=output_path, dpi=50)

        assert isinstance(fig, plt.Figure)
        assert output_path.exists()
        plt.close(fig)

    def test_plot_weight_sensitivity_heatmap(self, table, tmp_path):
        sensitivity_df = weight_sensitivity(
            table.matrix, [3, 2, 1], ['-', '+', '-'],
            labels=table.labels, criteria=table.criteria
        )
        output_path = tmp_path / 'heatmap.png'

        fig = plot_weight_sensitivity_heatmap(sensitivity_df, output_path=output_path, dpi=50)

        assert output_path.exists()
        plt.close(fig)
