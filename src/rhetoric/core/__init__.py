# Core components for political rhetoric classification

from .errors import (
    RhetoricError,
    DataError,
    EmptySentenceError,
    GraphBuildError,
    AnnotationError,
)
from .annotation import Token, AnnotatedSentence, Annotator, ROOT
from .vocab import Vocabulary, UNKNOWN, load_embeddings
from .data import (
    Target,
    NUM_TARGETS,
    TARGET_NAMES,
    Example,
    collect_paths,
    partition_paths,
    load_examples,
    shuffle_examples,
)
from .metrics import (
    confusion_matrix,
    accuracy_score,
    precision_recall_f1,
    macro_f1,
    classification_report,
    compute_all_metrics,
)
from .evaluation import EvaluationResult, evaluate, scores_from_confusion

__all__ = [
    "RhetoricError",
    "DataError",
    "EmptySentenceError",
    "GraphBuildError",
    "AnnotationError",
    "Token",
    "AnnotatedSentence",
    "Annotator",
    "ROOT",
    "Vocabulary",
    "UNKNOWN",
    "load_embeddings",
    "Target",
    "NUM_TARGETS",
    "TARGET_NAMES",
    "Example",
    "collect_paths",
    "partition_paths",
    "load_examples",
    "shuffle_examples",
    "confusion_matrix",
    "accuracy_score",
    "precision_recall_f1",
    "macro_f1",
    "classification_report",
    "compute_all_metrics",
    "EvaluationResult",
    "evaluate",
    "scores_from_confusion",
]
