"""
This package contains a political rhetoric classifier that labels a sentence
as Neutral, Liberal or Conservative.

Key modules:
- core.annotation: raw text -> annotated sentence (root token first)
- core.vocab: vocabulary with reserved unknown id, embedding loading
- core.data: labels, on-disk example layout, per-class partition
- core.metrics / core.evaluation: confusion matrix, accuracy, macro-F1
- models: GRU cell, feature attention pooling, classifier head, full model
- experiments: training pipeline and plots
"""

__version__ = "0.1.0"
