#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Performance Metrics Implementation from Scratch

This module implements the classification metrics reported after every
training epoch, without using sklearn.metrics:
- Confusion Matrix (rows = predicted class, columns = actual class)
- Accuracy
- Per-class Precision / Recall / F1 with small fixed stabilizers, so classes
  absent from the evaluation set do not divide by zero
- Macro F1
- Classification Report
"""

import numpy as np
from typing import Dict, List, Optional, Tuple

# stabilizers for precision/recall denominators and the F1 denominator
EPS = 1e-4
F1_EPS = 1e-8


def confusion_matrix(y_true, y_pred, n_classes: Optional[int] = None) -> np.ndarray:
    """
    Compute confusion matrix from scratch.

    Args:
        y_true: Ground truth class indices
        y_pred: Predicted class indices
        n_classes: Size of the label set (if None, inferred from the data)

    Returns:
        Float matrix where cm[predicted, actual] counts examples
    """
    y_true = np.asarray(y_true, dtype=int)
    y_pred = np.asarray(y_pred, dtype=int)

    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    if n_classes is None:
        n_classes = int(max(y_true.max(initial=-1), y_pred.max(initial=-1))) + 1

    cm = np.zeros((n_classes, n_classes), dtype=np.float64)
    for actual, pred in zip(y_true, y_pred):
        cm[pred, actual] += 1
    return cm


def accuracy_from_confusion(cm: np.ndarray) -> float:
    total = float(np.sum(cm))
    if total == 0:
        return 0.0
    return float(np.trace(cm) / total)


def precision_recall_f1(
    cm: np.ndarray, eps: float = EPS, f1_eps: float = F1_EPS
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Per-class precision, recall and F1 from a (predicted x actual) matrix.

    precision_i = TP_i / (predicted_i + eps)
    recall_i    = TP_i / (actual_i + eps)
    F1_i        = 2 * p_i * r_i / (p_i + r_i - f1_eps)
    """
    cm = np.asarray(cm, dtype=np.float64)
    tp = np.diag(cm)
    predicted = cm.sum(axis=1)  # row sums
    actual = cm.sum(axis=0)  # column sums

    precision = tp / (predicted + eps)
    recall = tp / (actual + eps)
    f1 = 2 * precision * recall / (precision + recall - f1_eps)
    # TP == 0 gives 0 / -f1_eps; report it as a plain zero
    f1 = np.where(tp == 0, 0.0, f1)
    return precision, recall, f1


def macro_f1(cm: np.ndarray) -> float:
    _, _, f1 = precision_recall_f1(cm)
    return float(np.mean(f1))


def accuracy_score(y_true, y_pred) -> float:
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)

    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    if len(y_true) == 0:
        return 0.0

    return float(np.sum(y_true == y_pred) / len(y_true))


def classification_report(
    cm: np.ndarray,
    target_names: Optional[List[str]] = None,
    digits: int = 4,
) -> str:
    """
    Generate classification report from a confusion matrix.

    Args:
        cm: Confusion matrix (rows predicted, columns actual)
        target_names: Names for labels (if None, use class indices)
        digits: Number of decimal places to show

    Returns:
        Formatted classification report string
    """
    cm = np.asarray(cm, dtype=np.float64)
    n = cm.shape[0]
    if target_names is None:
        target_names = [str(i) for i in range(n)]
    if len(target_names) != n:
        raise ValueError("target_names length must match number of labels")

    precision, recall, f1 = precision_recall_f1(cm)
    support = cm.sum(axis=0).astype(int)

    width = max(max(len(name) for name in target_names), len("macro avg"))

    report = f"{'':>{width}} {'precision':>9} {'recall':>9} {'f1-score':>9} {'support':>9}\n"
    report += "\n"
    for name, p, r, f, s in zip(target_names, precision, recall, f1, support):
        report += f"{name:>{width}} {p:>9.{digits}f} {r:>9.{digits}f} {f:>9.{digits}f} {s:>9}\n"
    report += "\n"
    report += f"{'accuracy':>{width}} {'':>9} {'':>9} {accuracy_from_confusion(cm):>9.{digits}f} {support.sum():>9}\n"
    report += (
        f"{'macro avg':>{width}} {np.mean(precision):>9.{digits}f} "
        f"{np.mean(recall):>9.{digits}f} {np.mean(f1):>9.{digits}f} {support.sum():>9}\n"
    )
    return report


def compute_all_metrics(cm: np.ndarray) -> Dict[str, float]:
    precision, recall, f1 = precision_recall_f1(cm)
    return {
        "accuracy": accuracy_from_confusion(cm),
        "precision_macro": float(np.mean(precision)),
        "recall_macro": float(np.mean(recall)),
        "f1_macro": float(np.mean(f1)),
    }
