"""Tests for confusion-matrix metrics and the evaluation loop."""

import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rhetoric.core.annotation import AnnotatedSentence
from rhetoric.core.data import Example, Target
from rhetoric.core.evaluation import evaluate, scores_from_confusion
from rhetoric.core.metrics import (
    accuracy_from_confusion,
    classification_report,
    compute_all_metrics,
    confusion_matrix,
    macro_f1,
    precision_recall_f1,
)


class _FixedModel:
    """Predicts from a lookup on the first word."""

    def __init__(self, table):
        self.table = table

    def predict_preparsed(self, sentence):
        return self.table[sentence.words[0].value]


def _ex(word, target):
    return Example(AnnotatedSentence.from_words([word]), target)


class TestConfusionMatrix:
    def test_rows_are_predictions(self):
        cm = confusion_matrix([0, 1, 2], [1, 1, 2], n_classes=3)
        # actual 0 predicted as 1
        assert cm[1, 0] == 1
        assert cm[0, 1] == 0
        assert cm.sum() == 3

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            confusion_matrix([0, 1], [0], n_classes=3)


class TestScores:
    def test_diagonal_is_perfect(self):
        cm = np.diag([5.0, 3.0, 7.0])
        res = scores_from_confusion(cm, correct=15, total=15)
        assert res.accuracy == 1.0
        assert res.macro_f1 == pytest.approx(1.0, abs=1e-3)

    def test_one_misclassification(self):
        cm = np.diag([4.0, 4.0, 4.0])
        cm[2, 0] = 1  # an actual Neutral predicted Conservative
        res = scores_from_confusion(cm, correct=12, total=13)
        assert res.accuracy < 1.0
        assert np.any(res.f1 < 1.0 - 1e-3)

    def test_absent_class_does_not_divide_by_zero(self):
        cm = np.zeros((3, 3))
        cm[0, 0] = 4
        precision, recall, f1 = precision_recall_f1(cm)
        assert np.all(np.isfinite(f1))
        assert f1[1] == 0.0 and f1[2] == 0.0
        assert macro_f1(cm) == pytest.approx(1 / 3, abs=1e-3)

    def test_precision_uses_predicted_counts(self):
        cm = np.array([[2.0, 2.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        precision, recall, _ = precision_recall_f1(cm)
        assert precision[0] == pytest.approx(0.5, abs=1e-3)  # 2 of 4 predicted Neutral
        assert recall[0] == pytest.approx(1.0, abs=1e-3)  # both actual Neutral found

    def test_report_and_summary(self):
        cm = np.diag([1.0, 2.0, 3.0])
        report = classification_report(cm, target_names=["Neutral", "Liberal", "Conservative"])
        assert "Conservative" in report and "macro avg" in report
        summary = compute_all_metrics(cm)
        assert summary["accuracy"] == accuracy_from_confusion(cm) == 1.0


class TestEvaluate:
    def test_all_correct(self):
        model = _FixedModel({"n": Target.NEUTRAL, "l": Target.LIBERAL, "c": Target.CONSERVATIVE})
        examples = [_ex("n", Target.NEUTRAL), _ex("l", Target.LIBERAL), _ex("c", Target.CONSERVATIVE)]
        res = evaluate(model, examples)
        acc, f1, cm = res.as_tuple()
        assert acc == 1.0
        assert f1 == pytest.approx(1.0, abs=1e-3)
        assert np.array_equal(cm, np.eye(3))

    def test_counts_every_example(self):
        model = _FixedModel({"x": Target.LIBERAL})
        examples = [_ex("x", Target.NEUTRAL), _ex("x", Target.LIBERAL), _ex("x", Target.LIBERAL)]
        res = evaluate(model, examples)
        assert res.accuracy == pytest.approx(2 / 3)
        assert res.confusion[Target.LIBERAL, Target.NEUTRAL] == 1
        assert res.confusion[Target.LIBERAL, Target.LIBERAL] == 2
        assert res.confusion.sum() == 3

    def test_empty_set(self):
        with pytest.raises(ValueError):
            evaluate(_FixedModel({}), [])
