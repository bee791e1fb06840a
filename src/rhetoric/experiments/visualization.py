# visualization.py
from pathlib import Path
from typing import Any, Dict, List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from ..core.data import TARGET_NAMES


def plot_confusion_matrix(confusion, save_dir: Path, title: str = "Validation",
                          filename: str = "confusion_matrix.png") -> Path:
    """Heatmap of a (predicted x actual) confusion matrix."""
    cm = np.asarray(confusion)
    fig, ax = plt.subplots(figsize=(5, 4))
    sns.heatmap(
        cm.astype(int),
        annot=True,
        fmt="d",
        cmap="Blues",
        ax=ax,
        cbar=True,
        square=True,
        xticklabels=TARGET_NAMES,
        yticklabels=TARGET_NAMES,
    )
    ax.set_title(f"{title}\nConfusion Matrix")
    ax.set_xlabel("Actual")
    ax.set_ylabel("Predicted")
    plt.tight_layout()
    out = Path(save_dir) / filename
    plt.savefig(out, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out


def plot_training_history(history: List[Dict[str, Any]], save_dir: Path,
                          filename: str = "training_history.png") -> Optional[Path]:
    if not history:
        print("No training history to visualize")
        return None

    epochs = [row["epoch"] for row in history]
    fig, ax1 = plt.subplots(figsize=(8, 5))
    ax1.plot(epochs, [row["cost"] for row in history], marker="o", color="tab:red", label="avg cost")
    ax1.set_xlabel("Epoch")
    ax1.set_ylabel("Average training cost")

    if "macro_f1" in history[0]:
        ax2 = ax1.twinx()
        ax2.plot(epochs, [row["accuracy"] for row in history], marker="s", label="val accuracy")
        ax2.plot(epochs, [row["macro_f1"] for row in history], marker="^", label="val macro-F1")
        ax2.set_ylabel("Validation score")
        ax2.set_ylim(0.0, 1.0)
        ax2.legend(loc="lower right")
    ax1.legend(loc="upper right")
    ax1.grid(True, alpha=0.3)
    ax1.set_title("Training cost and validation scores")

    plt.tight_layout()
    out = Path(save_dir) / filename
    plt.savefig(out, dpi=200)
    plt.close(fig)
    return out


def export_history_table(history: List[Dict[str, Any]], save_dir: Path) -> pd.DataFrame:
    rows = [{k: v for k, v in row.items() if k != "confusion"} for row in history]
    df = pd.DataFrame(rows)
    df.to_csv(Path(save_dir) / "training_history.csv", index=False)
    (Path(save_dir) / "training_history.md").write_text(
        df.to_markdown(index=False, floatfmt=".4f"), encoding="utf-8"
    )
    return df
