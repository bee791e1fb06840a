# Model implementations for political rhetoric classification

from .gru_cell import GRUCell
from .attention import FeatureAttention
from .classifier import ClassifierHead
from .rhetoric_gru import GRU_DEFAULTS, RhetoricNet, RhetoricClassifier, create_gru_factory
from .models_registry import get_factory_and_grid

__all__ = [
    "GRUCell",
    "FeatureAttention",
    "ClassifierHead",
    "GRU_DEFAULTS",
    "RhetoricNet",
    "RhetoricClassifier",
    "create_gru_factory",
    "get_factory_and_grid",
]
