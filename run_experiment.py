#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Runner for training the political rhetoric classifier.

- Run from project root.
- Expects <data-dir>/{neutral,liberal,conservative}/*.txt
- Trains with the registry defaults, CLI overrides, or a whole grid (--grid).
- Writes JSON summary, history table, plots and model.pt into --results-dir.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

# ---------------------------------------------------------------------
# Ensure we can import `rhetoric` without installing the package
# ---------------------------------------------------------------------
ROOT = Path(__file__).parent.resolve()
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from rhetoric.core.errors import RhetoricError  # type: ignore
from rhetoric.experiments.experimental_pipeline import TrainingPipeline  # type: ignore
from rhetoric.models.models_registry import get_factory_and_grid  # type: ignore


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """CLI flags that override registry defaults; unset flags are left out."""
    out: Dict[str, Any] = {}
    if args.epochs is not None:
        out["epochs"] = args.epochs
    if args.hidden_sizes is not None:
        out["hidden_sizes"] = tuple(args.hidden_sizes)
    if args.embedding_dim is not None:
        out["embedding_dim"] = args.embedding_dim
    if args.lr is not None:
        out["lr"] = args.lr
    if args.solver is not None:
        out["solver"] = args.solver
    if args.max_len is not None:
        out["max_len"] = args.max_len
    if args.emb_path is not None:
        out["emb_path"] = str(args.emb_path)
        if args.freeze_emb:
            out["freeze_emb"] = True
    if args.dtype is not None:
        out["dtype"] = args.dtype
    return out


def _patch_grid(grid: List[Dict[str, Any]], overrides: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [{**g, **overrides} for g in grid]


def main() -> int:
    ap = argparse.ArgumentParser(description="Train the attention-GRU rhetoric classifier")
    ap.add_argument("--data-dir", type=Path, default=Path("model"),
                    help="Directory containing neutral/, liberal/, conservative/")
    ap.add_argument("--results-dir", type=Path, default=Path("results"))
    ap.add_argument("--model", choices=["gru"], default="gru")
    ap.add_argument("--seed", type=int, default=1337)
    ap.add_argument("--split", type=float, default=0.85, help="Per-class training fraction")
    ap.add_argument("--grid", action="store_true", help="Search the registry grid by validation macro-F1")
    ap.add_argument("--fast", action="store_true", help="Use the small grid")

    # Optional overrides
    ap.add_argument("--epochs", type=int, default=None)
    ap.add_argument("--hidden_sizes", type=int, nargs="+", default=None, help="GRU layer widths, e.g. 100 30")
    ap.add_argument("--embedding_dim", type=int, default=None)
    ap.add_argument("--lr", type=float, default=None)
    ap.add_argument("--solver", choices=["adagrad", "adam"], default=None)
    ap.add_argument("--max_len", type=int, default=None, help="Maximum words kept per example")
    ap.add_argument("--emb_path", type=Path, default=None, help="Path to GloVe-format embedding file")
    ap.add_argument("--freeze_emb", action="store_true", help="Freeze embeddings when --emb_path is given")
    ap.add_argument("--dtype", choices=["float32", "float64"], default=None)

    args = ap.parse_args()

    overrides = _overrides(args)
    _, grid = get_factory_and_grid(args.model, fast=args.fast)

    pipeline = TrainingPipeline(
        data_dir=args.data_dir,
        results_dir=args.results_dir,
        params=overrides,
        split_ratio=args.split,
        seed=args.seed,
    )
    try:
        pipeline.run_complete_pipeline(grid=_patch_grid(grid, overrides) if args.grid else None)
    except (RhetoricError, ValueError) as e:
        print(f"Error while training: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
