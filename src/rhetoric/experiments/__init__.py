# Experimental components for political rhetoric classification

from .experimental_pipeline import TrainingPipeline
from .visualization import plot_confusion_matrix, plot_training_history, export_history_table

__all__ = [
    "TrainingPipeline",
    "plot_confusion_matrix",
    "plot_training_history",
    "export_history_table",
]
