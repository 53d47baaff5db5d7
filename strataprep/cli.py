"""
strataprep: Stratified split and preprocessing pipeline

CLI interface for partitioning a dataset and fitting a baseline regressor.

Usage:
    strataprep run <dataset.csv> [OPTIONS]
    strataprep split <dataset.csv> -o <dir> [OPTIONS]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import (
    Pipeline,
    PipelineConfig,
    ProgressCallback,
    ProgressUpdate,
    StrataPrepError,
    load_dataset,
)
from .config import DEFAULT_BIN_BOUNDARIES
from .models import get_available_algorithms


def _parse_boundaries(value: str) -> list[float]:
    try:
        return [float(v) for v in value.split(",") if v.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid boundaries '{value}': {e}") from e


def _build_config(args: argparse.Namespace) -> PipelineConfig:
    builder = (
        PipelineConfig.builder()
        .target_column(args.target)
        .stratify_source(args.stratify)
        .bin_boundaries(args.boundaries)
        .test_size(args.test_size)
        .random_seed(args.seed)
    )
    if getattr(args, "categorical", None):
        builder = builder.categorical_columns(args.categorical)
    if args.command == "run":
        builder = (
            builder.imputation_strategy(args.strategy)
            .unknown_category(args.unknown)
            .evaluate_on(args.evaluate_on)
            .algorithm(args.algorithm)
        )
    return builder.build()


def _on_progress(verbose: bool) -> ProgressCallback:
    def callback(update: ProgressUpdate) -> None:
        if verbose:
            print(f"[{update.progress * 100:5.1f}%] {update.step.value}: {update.message}")

    return callback


def cmd_run(args: argparse.Namespace) -> int:
    """Split, preprocess, fit and evaluate."""
    data = load_dataset(args.input)
    print(f"Loaded {len(data)} rows, {len(data.columns)} columns")

    config = _build_config(args)
    pipeline = Pipeline.builder().config(config).on_progress(_on_progress(args.verbose)).build()
    result = pipeline.run(data)

    metrics = result.metrics
    print("-" * 60)
    print(f"Train rows: {result.n_train}")
    print(f"Test rows:  {result.n_test}")
    print(f"Algorithm:  {config.algorithm}")
    print(f"Evaluated on {metrics.evaluated_on} ({metrics.n_samples} rows):")
    print(f"  MAE:  {metrics.mae:.4f}")
    print(f"  RMSE: {metrics.rmse:.4f}")
    print(f"  R2:   {metrics.r2:.4f}")
    for warning in result.warnings:
        print(f"Warning: {warning}")
    return 0


def cmd_split(args: argparse.Namespace) -> int:
    """Write the stratified train and test partitions to CSV."""
    data = load_dataset(args.input)

    config = _build_config(args)
    pipeline = Pipeline.builder().config(config).on_progress(_on_progress(args.verbose)).build()
    partitions = pipeline.split(data)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    partitions.train.to_csv(output_dir / "train.csv", index=False)
    partitions.test.to_csv(output_dir / "test.csv", index=False)

    print(f"Outputs saved to: {output_dir}/")
    print(f"  - train.csv ({len(partitions.train)} rows)")
    print(f"  - test.csv ({len(partitions.test)} rows)")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Input CSV file")
    parser.add_argument(
        "-t", "--target", default="median_house_value", help="Target column name"
    )
    parser.add_argument(
        "-s", "--stratify", default="median_income", help="Column binned into strata"
    )
    parser.add_argument(
        "-b",
        "--boundaries",
        type=_parse_boundaries,
        default=list(DEFAULT_BIN_BOUNDARIES),
        help="Comma-separated ascending stratum boundaries",
    )
    parser.add_argument("--test-size", type=float, default=0.2, help="Test fraction")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "-c", "--categorical", nargs="+", help="Categorical columns (auto-detected by default)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="strataprep: Stratified split and preprocessing pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Run command
    run_parser = subparsers.add_parser("run", help="Split, preprocess, fit and evaluate")
    _add_common_arguments(run_parser)
    run_parser.add_argument(
        "--strategy",
        choices=["median", "mean", "most_frequent"],
        default="median",
        help="Imputation statistic",
    )
    run_parser.add_argument(
        "--unknown",
        choices=["error", "reserve"],
        default="error",
        help="Policy for categories unseen in training data",
    )
    run_parser.add_argument(
        "-e",
        "--evaluate-on",
        choices=["train", "test"],
        default="train",
        help="Partition to evaluate the fitted model on",
    )
    run_parser.add_argument(
        "-a",
        "--algorithm",
        choices=get_available_algorithms(),
        default="linear_regression",
        help="Regressor to fit",
    )

    # Split command
    split_parser = subparsers.add_parser("split", help="Write stratified train/test CSV files")
    _add_common_arguments(split_parser)
    split_parser.add_argument("-o", "--output", default="output", help="Output directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "run":
            return cmd_run(args)
        elif args.command == "split":
            return cmd_split(args)
    except StrataPrepError as e:
        stage = f" (stage: {e.stage})" if e.stage else ""
        print(f"Error{stage}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
