"""
Tests for the run_topsis driver script.
"""
import importlib.util

import pytest
import pandas as pd
import yaml

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from topsis_engine.core import load_json, setup_logging

SCRIPT = Path(__file__).parent.parent / 'scripts' / 'run_topsis.py'


@pytest.fixture
def run_topsis():
    spec = importlib.util.spec_from_file_location('run_topsis', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module
    # release the per-run log file handler
    setup_logging(console=False)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'phones.csv').write_text(
        "Model,Price,Battery,Weight\n"
        "P1,540,9,1.3\n"
        "P2,620,7,1.1\n"
        "P3,580,8,1.5\n",
        encoding='utf-8'
    )
    return tmp_path


class TestRunTopsis:
    """End-to-end runs of the driver script."""

    def test_rank_and_export(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '3,2,1', '--impacts', '-,+,-',
            '--run-id', 'run_test', '--no-plots'
        ])

        assert code == 0
        tables = workdir / 'outputs' / 'runs' / 'run_test' / 'tables'
        result = pd.read_csv(tables / 'topsis-result.csv')
        assert result['Rank'].tolist() == [1, 3, 2]

        summary = load_json(tables / 'topsis_summary.json')
        assert summary['best_alternative'] == 'P1'
        assert [r['alternative'] for r in summary['ranking']] == ['P1', 'P3', 'P2']

    def test_explicit_output_and_sensitivity(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '3,2,1', '--impacts', '-,+,-',
            '--run-id', 'run_sens', '--output', 'result.csv', '--sensitivity'
        ])

        assert code == 0
        assert (workdir / 'result.csv').exists()
        run_dir = workdir / 'outputs' / 'runs' / 'run_sens'
        assert (run_dir / 'tables' / 'weight_sensitivity.csv').exists()
        assert (run_dir / 'tables' / 'criterion_removal.csv').exists()
        assert (run_dir / 'figures' / 'topsis_ranking.png').exists()
        assert (run_dir / 'configs_snapshot' / 'config.yaml').exists()

    def test_shape_mismatch_fails(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '1,2', '--impacts', '-,+,-',
            '--run-id', 'run_bad', '--no-plots'
        ])

        assert code == 1
        assert not (workdir / 'outputs' / 'runs' / 'run_bad' / 'tables' / 'topsis-result.csv').exists()

    def test_bad_impact_fails(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '1,1,1', '--impacts', '-,*,-',
            '--run-id', 'run_bad', '--no-plots'
        ])
        assert code == 1

    def test_malformed_weights_fail(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '1,x,1', '--impacts', '-,+,-',
            '--run-id', 'run_bad', '--no-plots'
        ])
        assert code == 1

    def test_missing_input_fails(self, run_topsis, workdir):
        code = run_topsis.main([
            'missing.csv', '--weights', '1', '--impacts', '+',
            '--run-id', 'run_bad', '--no-plots'
        ])
        assert code == 1

    def test_debug_log_level_records_engine_notices(self, run_topsis, workdir):
        (workdir / 'flat.csv').write_text(
            "Model,Price,Colour\n"
            "P1,540,0\n"
            "P2,620,0\n",
            encoding='utf-8'
        )

        code = run_topsis.main([
            'flat.csv', '--weights', '1,1', '--impacts', '-,+',
            '--run-id', 'run_debug', '--no-plots', '--log-level', 'debug'
        ])

        assert code == 0
        run_dir = workdir / 'outputs' / 'runs' / 'run_debug'
        log_text = (run_dir / 'logs' / 'run_debug.log').read_text(encoding='utf-8')
        assert 'Criterion 1 has zero norm' in log_text
        assert 'DEBUG' in log_text

        snapshot = yaml.safe_load((run_dir / 'configs_snapshot' / 'config.yaml').read_text())
        assert snapshot['logging']['level'] == 'DEBUG'

    def test_default_log_level_hides_engine_notices(self, run_topsis, workdir):
        code = run_topsis.main([
            'phones.csv', '--weights', '3,2,1', '--impacts', '-,+,-',
            '--run-id', 'run_info', '--no-plots'
        ])

        assert code == 0
        log_text = (workdir / 'outputs' / 'runs' / 'run_info' / 'logs' / 'run_info.log').read_text(encoding='utf-8')
        assert 'DEBUG' not in log_text
        assert 'TOPSIS scoring done in' in log_text

    def test_unknown_log_level_rejected(self, run_topsis, workdir):
        with pytest.raises(SystemExit):
            run_topsis.main([
                'phones.csv', '--weights', '3,2,1', '--impacts', '-,+,-',
                '--log-level', 'LOUD'
            ])

    @pytest.mark.parametrize("perturbation", [1.5, 0])
    def test_invalid_config_fails_before_any_output(self, run_topsis, workdir, perturbation):
        (workdir / 'config.yaml').write_text(
            yaml.dump({'sensitivity': {'enabled': True, 'perturbation': perturbation}}),
            encoding='utf-8'
        )

        code = run_topsis.main([
            'phones.csv', '--weights', '3,2,1', '--impacts', '-,+,-',
            '--config', 'config.yaml', '--run-id', 'run_badcfg',
            '--output', 'result.csv', '--no-plots'
        ])

        assert code == 1
        assert not (workdir / 'result.csv').exists()
        assert not (workdir / 'outputs' / 'runs' / 'run_badcfg').exists()
