# models_registry.py
from typing import Tuple

from .rhetoric_gru import GRU_DEFAULTS, create_gru_factory


def get_factory_and_grid(model: str, fast: bool = True) -> Tuple:
    """
    Return (factory, param_grid). factory: params(dict) -> estimator
    param_grid: List[dict], each entry a complete set of hyperparameters
    """
    model = model.lower()

    if model in {"gru", "rhetoric", "attn-gru"}:
        factory = create_gru_factory()
        if fast:
            grid = [
                {
                    **GRU_DEFAULTS,
                    "embedding_dim": 50,
                    "hidden_sizes": hs,
                    "epochs": 2,
                }
                for hs in ((32,), (64, 16))
            ]
        else:
            grid = [
                {
                    **GRU_DEFAULTS,
                    "hidden_sizes": hs,
                    "lr": lr,
                    "epochs": 5,
                }
                for hs in ((100, 30), (128,), (64, 32))
                for lr in (0.05, 0.01)
            ]
        return factory, grid

    raise ValueError(f"Unknown model: {model}")
