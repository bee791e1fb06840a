# evaluation.py
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from .data import Example, NUM_TARGETS
from .metrics import precision_recall_f1


@dataclass
class EvaluationResult:
    accuracy: float
    macro_f1: float
    confusion: np.ndarray  # rows = predicted, cols = actual
    precision: np.ndarray
    recall: np.ndarray
    f1: np.ndarray

    def as_tuple(self) -> Tuple[float, float, np.ndarray]:
        return self.accuracy, self.macro_f1, self.confusion


def scores_from_confusion(confusion: np.ndarray, correct: float, total: int) -> EvaluationResult:
    precision, recall, f1 = precision_recall_f1(confusion)
    return EvaluationResult(
        accuracy=float(correct / total),
        macro_f1=float(np.mean(f1)),
        confusion=confusion,
        precision=precision,
        recall=recall,
        f1=f1,
    )


def evaluate(model, examples: Sequence[Example]) -> EvaluationResult:
    """Predict every example with ``model.predict_preparsed`` and score the pass.

    Prediction errors propagate; nothing is skipped.
    """
    if len(examples) == 0:
        raise ValueError("cannot evaluate on an empty example set")

    confusion = np.zeros((NUM_TARGETS, NUM_TARGETS), dtype=np.float64)
    correct = 0.0
    for ex in examples:
        pred = model.predict_preparsed(ex.sentence)
        if pred == ex.target:
            correct += 1
        confusion[int(pred), int(ex.target)] += 1

    return scores_from_confusion(confusion, correct, len(examples))
