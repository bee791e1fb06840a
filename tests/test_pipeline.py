"""Tests for the model registry and the end-to-end training pipeline."""

import json

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rhetoric.core.data import Target
from rhetoric.core.errors import DataError
from rhetoric.experiments.experimental_pipeline import TrainingPipeline
from rhetoric.models.models_registry import get_factory_and_grid
from rhetoric.models.rhetoric_gru import GRU_DEFAULTS, RhetoricClassifier

_TEXTS = {
    Target.NEUTRAL: ["the weather is mild today", "the train leaves at noon", "rain is expected later"],
    Target.LIBERAL: ["expand healthcare for all", "act on climate change now", "protect voting rights"],
    Target.CONSERVATIVE: ["cut taxes and regulation", "secure the border first", "defend the second amendment"],
}


def _write_corpus(root: Path, copies: int = 3):
    for t, texts in _TEXTS.items():
        d = root / t.directory
        d.mkdir(parents=True)
        for c in range(copies):
            for i, text in enumerate(texts):
                (d / f"{c}_{i}.txt").write_text(text, encoding="utf-8")


class TestRegistry:
    def test_gru_factory(self):
        factory, grid = get_factory_and_grid("gru", fast=True)
        assert grid and all("hidden_sizes" in g for g in grid)
        model = factory({**grid[0]})
        assert isinstance(model, RhetoricClassifier)

    def test_full_grid_uses_defaults(self):
        _, grid = get_factory_and_grid("GRU", fast=False)
        assert all(set(GRU_DEFAULTS) <= set(g) for g in grid)

    def test_unknown_model(self):
        with pytest.raises(ValueError):
            get_factory_and_grid("electra")


class TestTrainingPipeline:
    def test_complete_run(self, tmp_path):
        data, results = tmp_path / "data", tmp_path / "results"
        _write_corpus(data)
        pipeline = TrainingPipeline(
            data_dir=data,
            results_dir=results,
            params={"embedding_dim": 8, "hidden_sizes": (6,), "epochs": 2},
            split_ratio=0.7,
            seed=5,
        )
        out = pipeline.run_complete_pipeline()

        assert len(pipeline.train_examples) == 18 and len(pipeline.validation_examples) == 9
        summary = json.loads(Path(out).read_text(encoding="utf-8"))
        assert len(summary["history"]) == 2
        assert 0.0 <= summary["validation"]["accuracy"] <= 1.0
        assert len(summary["validation"]["confusion_matrix"]) == 3
        for name in ("training_history.csv", "training_history.png", "confusion_matrix.png", "model.pt"):
            assert (results / name).exists()

        loaded = RhetoricClassifier.load(results / "model.pt")
        assert loaded.predict("cut taxes now") in set(Target)

    def test_grid_search_picks_a_config(self, tmp_path):
        data = tmp_path / "data"
        _write_corpus(data)
        pipeline = TrainingPipeline(data_dir=data, results_dir=tmp_path / "results", seed=2)
        pipeline.load_and_prepare_data()
        grid = [
            {"embedding_dim": 4, "hidden_sizes": (3,), "epochs": 1},
            {"embedding_dim": 4, "hidden_sizes": (4, 2), "epochs": 1},
        ]
        pipeline.run_grid_search(grid)
        assert len(pipeline.results["grid_search"]) == 2
        assert pipeline.params["hidden_sizes"] in {(3,), (4, 2)}

    def test_missing_data_aborts(self, tmp_path):
        pipeline = TrainingPipeline(data_dir=tmp_path / "nothing", results_dir=tmp_path / "results")
        with pytest.raises(DataError):
            pipeline.run_complete_pipeline()
