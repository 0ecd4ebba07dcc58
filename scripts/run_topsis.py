#!/usr/bin/env python
"""
Rank a Decision Table with TOPSIS
=================================
Load a CSV decision table, rank its alternatives with TOPSIS and export the
table with score and rank columns appended.

Usage:
    python scripts/run_topsis.py INPUT --weights W --impacts I [--output PATH]
        [--config CONFIG_PATH] [--run-id RUN_ID] [--sensitivity] [--no-plots]
        [--log-level {DEBUG,INFO,WARNING,ERROR}]

Examples:
    python scripts/run_topsis.py data.csv --weights "1,1,1,2" --impacts "+,+,-,+"

Outputs:
    - outputs/runs/<run_id>/tables/topsis-result.csv (or --output)
    - outputs/runs/<run_id>/tables/topsis_summary.json
    - outputs/runs/<run_id>/tables/weight_sensitivity.csv (--sensitivity)
    - outputs/runs/<run_id>/tables/criterion_removal.csv (--sensitivity)
    - outputs/runs/<run_id>/figures/topsis_ranking.png
    - outputs/runs/<run_id>/figures/weight_sensitivity.png (--sensitivity)
    - outputs/runs/<run_id>/logs/<run_id>.log
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt

from topsis_engine.core import (
    Config, create_run_directories, setup_logging, save_json_numpy, LogContext
)
from topsis_engine.data_io import (
    ParseError, load_decision_table, parse_weights, parse_impacts
)
from topsis_engine.decision import (
    ValidationError, rank, weight_sensitivity, criterion_removal_sensitivity,
    compute_rank_stability_score
)
from topsis_engine.reporting import (
    build_result_table, save_result_table, set_plot_style,
    plot_topsis_ranking, plot_weight_sensitivity_heatmap
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Rank a decision table with TOPSIS')
    parser.add_argument('input', type=str,
                        help='CSV file: first column labels, remaining columns criteria')
    parser.add_argument('--weights', type=str, required=True,
                        help='Comma-separated weights, e.g. "1,1,2"')
    parser.add_argument('--impacts', type=str, required=True,
                        help='Comma-separated impacts, "+" benefit or "-" cost')
    parser.add_argument('--output', type=str, default=None,
                        help='Result CSV path. Default: run tables directory')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file')
    parser.add_argument('--run-id', type=str, default=None,
                        help='Run ID to use')
    parser.add_argument('--sensitivity', action='store_true',
                        help='Also run weight and criterion-removal sensitivity analysis')
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip figures')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Override logging.level from the config')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if args.config and Path(args.config).exists():
        config = Config.load(args.config)
    else:
        config = Config()

    if args.run_id:
        config.run_id = args.run_id
    if args.sensitivity:
        config.sensitivity.enabled = True
    if args.no_plots:
        config.output.save_figures = False
    if args.log_level:
        config.logging.level = args.log_level

    try:
        config.validate()
    except ValueError as e:
        logger = setup_logging(level='INFO')
        logger.error(f"Invalid configuration: {e}")
        return 1

    dirs = create_run_directories(config)
    logger = setup_logging(
        log_dir=dirs['logs'],
        run_id=config.run_id,
        level=config.logging.level,
        console=config.logging.console
    )
    config.save(dirs['configs_snapshot'] / 'config.yaml')

    logger.info("=" * 60)
    logger.info("TOPSIS Ranking")
    logger.info("=" * 60)

    try:
        table = load_decision_table(args.input, config.ingest)
        weights = parse_weights(args.weights, config.ingest.list_separator)
        impacts = parse_impacts(args.impacts, config.ingest.list_separator)

        with LogContext(logger, "TOPSIS scoring"):
            results = rank(table.matrix, weights, impacts)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except ParseError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid decision problem ({e.invariant}): {e}")
        return 1

    result_df = build_result_table(table, results, config.export)
    output_path = Path(args.output) if args.output else dirs['tables'] / config.export.filename
    save_result_table(result_df, output_path, config.export)

    best = min(results, key=lambda r: r.rank)
    summary = {
        'run_id': config.run_id,
        'input': str(args.input),
        'criteria': table.criteria,
        'weights': weights,
        'impacts': impacts,
        'n_alternatives': table.n_alternatives,
        'best_alternative': table.labels[best.index],
        'best_score': best.score,
        'ranking': [
            {'alternative': table.labels[r.index], 'score': r.score, 'rank': r.rank}
            for r in sorted(results, key=lambda r: r.rank)
        ]
    }

    if config.sensitivity.enabled:
        with LogContext(logger, "Sensitivity analysis"):
            weight_df = weight_sensitivity(
                table.matrix, weights, impacts,
                labels=table.labels,
                criteria=table.criteria,
                perturbation=config.sensitivity.perturbation
            )
            removal_df = criterion_removal_sensitivity(
                table.matrix, weights, impacts,
                labels=table.labels,
                criteria=table.criteria
            )
            weight_df.to_csv(dirs['tables'] / 'weight_sensitivity.csv', index=False)
            removal_df.to_csv(dirs['tables'] / 'criterion_removal.csv', index=False)
            summary['weight_stability'] = compute_rank_stability_score(weight_df)
            summary['removal_stability'] = compute_rank_stability_score(removal_df)

    save_json_numpy(summary, dirs['tables'] / 'topsis_summary.json')

    if config.output.save_figures:
        set_plot_style()
        fmt = config.output.figure_format
        fig = plot_topsis_ranking(
            result_df,
            label_col=table.label_header,
            score_col=config.export.score_column,
            rank_col=config.export.rank_column,
            output_path=dirs['figures'] / f'topsis_ranking.{fmt}',
            dpi=config.output.figure_dpi
        )
        plt.close(fig)
        if config.sensitivity.enabled and not weight_df.empty:
            fig = plot_weight_sensitivity_heatmap(
                weight_df,
                output_path=dirs['figures'] / f'weight_sensitivity.{fmt}',
                dpi=config.output.figure_dpi
            )
            plt.close(fig)

    logger.info("=" * 60)
    logger.info("TOPSIS Ranking Complete!")
    logger.info(f"  Alternatives ranked: {table.n_alternatives}")
    logger.info(f"  Best alternative: {table.labels[best.index]} (score: {best.score:.4f})")
    logger.info(f"  Results saved to: {output_path}")
    logger.info("=" * 60)

    return 0


if __name__ == '__main__':
    sys.exit(main())
