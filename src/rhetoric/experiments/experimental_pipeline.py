#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Training Pipeline for Political Rhetoric Classification

Orchestrates one complete run:
1. Collect example files per class and partition them (per class, 0.85 split)
2. Annotate every example
3. Train the attention-GRU classifier one example at a time, evaluating
   on the validation set after every epoch
4. Optionally pick hyperparameters from a grid by validation macro-F1
5. Save results (JSON summary, history table, plots, checkpoint)
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from ..core.annotation import Annotator
from ..core.data import (
    MAX_QUERY,
    SPLIT_RATIO,
    TARGET_NAMES,
    Target,
    collect_paths,
    load_examples,
    partition_paths,
)
from ..core.evaluation import evaluate
from ..core.metrics import classification_report
from ..models.rhetoric_gru import GRU_DEFAULTS, RhetoricClassifier
from .visualization import export_history_table, plot_confusion_matrix, plot_training_history


class TrainingPipeline:
    """
    Main training pipeline.

    Every failure (missing data, unreadable file, graph-build error) aborts
    the run; nothing is retried or skipped.
    """

    def __init__(
        self,
        data_dir: str = "model",
        results_dir: str = "results",
        params: Optional[Dict[str, Any]] = None,
        split_ratio: float = SPLIT_RATIO,
        seed: int = 1337,
    ):
        """
        Args:
            data_dir: Directory holding neutral/, liberal/ and conservative/
            results_dir: Directory to save results
            params: Model hyperparameters (missing keys fall back to GRU_DEFAULTS)
            split_ratio: Fraction of each class's files used for training
            seed: Random seed for the partition and the model
        """
        self.data_dir = Path(data_dir)
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.params = {**GRU_DEFAULTS, **(params or {}), "seed": seed}
        self.split_ratio = split_ratio
        self.seed = seed
        self.annotator = Annotator()

        self.train_examples = []
        self.validation_examples = []
        self.model: Optional[RhetoricClassifier] = None
        self.results: Dict[str, Any] = {}

    def load_and_prepare_data(self):
        print("=" * 60)
        print("STEP 1: Loading and Preparing Data")
        print("=" * 60)

        paths = collect_paths(self.data_dir)
        for t, ps in paths.items():
            print(f"[data] {t}: {len(ps)} files")
        train_pairs, val_pairs = partition_paths(paths, ratio=self.split_ratio, seed=self.seed)

        max_len = self.params.get("max_len", MAX_QUERY)
        self.train_examples = load_examples(train_pairs, self.annotator, max_len)
        self.validation_examples = load_examples(val_pairs, self.annotator, max_len)
        print(
            f"Everything loaded. {len(self.train_examples)} examples. "
            f"{len(self.validation_examples)} validations"
        )
        if self.train_examples:
            ex = self.train_examples[0]
            print(f"[data] sample ({ex.target}): {ex.sentence.value_string()[:80]!r}")

    def _train_one_config(self, params: Dict[str, Any]):
        model = RhetoricClassifier(annotator=self.annotator, **params)
        history = model.fit(self.train_examples, self.validation_examples)
        return model, history

    def train(self):
        print("\n" + "=" * 60)
        print("STEP 2: Training")
        print("=" * 60)
        print(f"Params: {self.params}")

        self.model, history = self._train_one_config(self.params)
        self.results["params"] = self.params
        self.results["history"] = history
        return history

    def run_grid_search(self, grid: List[Dict[str, Any]]):
        """Train every config in ``grid``; keep the one with best validation macro-F1."""
        print("\n" + "=" * 60)
        print("STEP 2: Hyperparameter Search")
        print("=" * 60)
        if not self.validation_examples:
            raise ValueError("grid search needs a non-empty validation set")

        best_f1, best = -1.0, None
        trials = []
        for pi, p in enumerate(grid, 1):
            params = {**p, "seed": self.seed}
            model, history = self._train_one_config(params)
            f1 = history[-1]["macro_f1"]
            print(f"    [{pi}/{len(grid)}] params={params}  val_f1={f1:.4f}")
            trials.append({"params": params, "macro_f1": f1})
            if f1 > best_f1:
                best_f1, best = f1, (params, model, history)

        self.params, self.model, history = best
        print(f"  Best params: {self.params}")
        self.results["grid_search"] = trials
        self.results["params"] = self.params
        self.results["history"] = history
        return history

    def evaluate_model(self):
        print("\n" + "=" * 60)
        print("STEP 3: Final Validation")
        print("=" * 60)
        if not self.validation_examples:
            print("No validation examples; skipping evaluation")
            return None

        res = evaluate(self.model, self.validation_examples)
        print(classification_report(res.confusion, target_names=TARGET_NAMES))
        self.results["validation"] = {
            "accuracy": res.accuracy,
            "macro_f1": res.macro_f1,
            "confusion_matrix": res.confusion.tolist(),
            "per_class": {
                str(t): {
                    "precision": float(res.precision[t]),
                    "recall": float(res.recall[t]),
                    "f1": float(res.f1[t]),
                }
                for t in Target
            },
        }
        return res

    def save_results(self):
        print("\n" + "=" * 60)
        print("STEP 4: Saving Results")
        print("=" * 60)

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_path = self.results_dir / f"experiment_results_{stamp}.json"
        with open(results_path, "w", encoding="utf-8") as f:
            json.dump(self.results, f, indent=2, sort_keys=True, ensure_ascii=False,
                      default=lambda v: v.tolist() if isinstance(v, np.ndarray) else str(v))
        print(f"Results saved to: {results_path}")

        history = self.results.get("history", [])
        if history:
            export_history_table(history, self.results_dir)
            plot_training_history(history, self.results_dir)
            print(f"[plots] Saved training_history.(csv|md|png) into {self.results_dir}")
        if "validation" in self.results:
            plot_confusion_matrix(self.results["validation"]["confusion_matrix"], self.results_dir)
            print(f"[plots] Saved confusion_matrix.png into {self.results_dir}")

        if self.model is not None:
            ckpt = self.results_dir / "model.pt"
            self.model.save(ckpt)
            print(f"Checkpoint saved to: {ckpt}")
        return results_path

    def run_complete_pipeline(self, grid: Optional[List[Dict[str, Any]]] = None):
        self.load_and_prepare_data()
        if grid:
            self.run_grid_search(grid)
        else:
            self.train()
        self.evaluate_model()
        return self.save_results()


def main():
    pipeline = TrainingPipeline()
    pipeline.run_complete_pipeline()


if __name__ == "__main__":
    main()
