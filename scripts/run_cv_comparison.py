#!/usr/bin/env python
"""
Compare linear, smooth and wiggly models with repeated cross-validation.

Draws repeated random 80/20 train/test splits, fits each model on every
train partition, scores held-out RMSE (plus MAE and R-squared), and writes
the per-split scores, the per-model summary, and two plots.

Usage:
    python scripts/run_cv_comparison.py
    python scripts/run_cv_comparison.py --shape nonlinear --n-splits 50
    python scripts/run_cv_comparison.py --data cars.csv --response dist --predictor speed
    python scripts/run_cv_comparison.py --data raw.csv --rename "Speed (mph)=speed" --predictor speed

Results saved to experiments/cv_comparison_{timestamp}/.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import yaml

from src.config import CVExperimentConfig
from src.data.tables import load_table
from src.experiments.cv_comparison import run_cv_comparison, simulate_data
from src.logging_config import setup_logging
from src.models.registry import MODEL_KINDS
from src.reporting.plots import plot_fitted_curves, plot_score_distributions


def parse_renames(pairs: list[str]) -> dict[str, str]:
    """Parse OLD=NEW column renames from the command line."""
    renames = {}
    for pair in pairs:
        old, sep, new = pair.partition("=")
        if not sep or not old or not new:
            raise SystemExit(f"--rename expects OLD=NEW, got {pair!r}")
        renames[old] = new
    return renames


def main():
    parser = argparse.ArgumentParser(
        description="Cross-validated comparison of linear vs smooth vs wiggly models"
    )
    parser.add_argument("--config", type=str, help="Path to config YAML file")
    parser.add_argument("--data", type=str, help="Delimited file to analyse (default: simulate)")
    parser.add_argument("--sep", type=str, default=",", help="Field delimiter for --data")
    parser.add_argument("--rename", action="append", default=[], metavar="OLD=NEW",
                        help="Rename a column after loading (repeatable)")
    parser.add_argument("--response", type=str, help="Response column (overrides config)")
    parser.add_argument("--predictor", type=str, help="Predictor column (overrides config)")
    parser.add_argument("--shape", choices=["linear", "nonlinear"], default="linear",
                        help="Signal shape when simulating")
    parser.add_argument("--models", nargs="+", choices=list(MODEL_KINDS), default=list(MODEL_KINDS))
    parser.add_argument("--n-splits", type=int, help="Number of splits (overrides config)")
    parser.add_argument("--holdout", type=float, help="Held-out fraction or count (overrides config)")
    parser.add_argument("--seed", type=int, help="Split seed (overrides config)")
    parser.add_argument("--name", type=str, default="", help="Experiment name suffix")
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument("--no-progress", action="store_true", help="Hide progress bar")
    args = parser.parse_args()

    # Load config (CLI overrides config)
    cfg = CVExperimentConfig.from_yaml(args.config)
    overrides = {}
    if args.response:
        overrides["response"] = args.response
    if args.predictor:
        overrides["predictor"] = args.predictor
    resample = cfg.resample.model_dump()
    if args.n_splits is not None:
        resample["n_splits"] = args.n_splits
    if args.holdout is not None:
        resample["holdout"] = args.holdout
    if args.seed is not None:
        resample["random_seed"] = args.seed
    cfg = CVExperimentConfig(**{**cfg.model_dump(), **overrides, "resample": resample})

    # Create output directory
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    exp_name = f"cv_comparison_{timestamp}"
    if args.name:
        exp_name += f"_{args.name}"
    exp_dir = PROJECT_ROOT / "experiments" / exp_name
    exp_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(args.log_level, log_file=exp_dir / "run.log")

    if args.data:
        data = load_table(
            args.data,
            rename=parse_renames(args.rename),
            required=[cfg.response, cfg.predictor],
            sep=args.sep,
        )
        source = args.data
    else:
        data = simulate_data(cfg, shape=args.shape)
        source = f"simulated ({args.shape}, n={len(data)})"

    print("=" * 70)
    print("Cross-validated model comparison")
    print("=" * 70)
    print(f"  Config: {args.config or 'configs/cv_experiment.yaml'}")
    print(f"  Data: {source}")
    print(f"  Model: {cfg.response} ~ {cfg.predictor}")
    print(f"  Candidates: {args.models}")
    print(f"  Splits: {cfg.resample.n_splits} x holdout {cfg.resample.holdout}")
    print(f"  Output: {exp_dir}")
    print("=" * 70)

    # Save config to output directory
    with open(exp_dir / "config.yaml", "w") as f:
        yaml.dump(cfg.model_dump(), f, default_flow_style=False)

    result = run_cv_comparison(
        data, cfg, kinds=args.models, show_progress=not args.no_progress
    )

    result.scores.to_csv(exp_dir / "scores.csv", index=False)
    result.summary.to_csv(exp_dir / "summary.csv", index=False)
    result.collection.to_frame().to_csv(exp_dir / "splits.csv", index=False)
    with open(exp_dir / "summary.json", "w") as f:
        json.dump(result.summary.to_dict(orient="records"), f, indent=2)

    primary = cfg.primary_metric
    plot_score_distributions(
        result.scores, exp_dir / f"{primary}_by_model.png", metric=primary
    )
    plot_fitted_curves(
        result.data, cfg.response, cfg.predictor, result.full_fits,
        exp_dir / "fitted_curves.png",
    )

    # Print summary
    primary_rows = result.summary[result.summary["metric"] == primary]
    print("\n" + "=" * 70)
    print(f"HELD-OUT {primary.upper()}")
    print("=" * 70)
    for _, row in primary_rows.iterrows():
        print(f"  {row['model']:<8} mean={row['mean']:.4f}  sd={row['std']:.4f}  "
              f"range=[{row['min']:.4f}, {row['max']:.4f}]")
    print("=" * 70)
    print(f"\nResults saved to: {exp_dir}")
    print("  - Per-split scores: scores.csv")
    print("  - Summary: summary.csv, summary.json")
    print(f"  - Plots: {primary}_by_model.png, fitted_curves.png")


if __name__ == "__main__":
    main()
