# attention.py
from typing import List, Sequence

import torch
import torch.nn as nn

from ..core.errors import GraphBuildError


class FeatureAttention(nn.Module):
    """
    Per-feature temporal attention pooling.

    Every hidden-state feature attends over time on its own: the energy of a
    step is a vector, not a scalar, and normalisation runs across the time
    axis separately for each feature.

        e_t = exp(tanh(W @ h_t))
        S   = sum_t e_t
        w_t = e_t / S
        ctx = sum_t w_t * h_t

    tanh keeps the exponent in [-1, 1], so exp cannot overflow.
    """

    def __init__(self, hidden_dim: int, name: str = "attention",
                 dtype: torch.dtype = torch.float32):
        super().__init__()
        self.hidden_dim = hidden_dim
        self.name = name
        self.w = nn.Parameter(torch.empty(hidden_dim, hidden_dim, dtype=dtype))
        nn.init.xavier_normal_(self.w)

    def energy(self, h: torch.Tensor) -> torch.Tensor:
        return torch.exp(torch.tanh(self.w @ h))

    @staticmethod
    def weights(energies: Sequence[torch.Tensor]) -> List[torch.Tensor]:
        total = energies[0]
        for e in energies[1:]:
            total = total + e
        return [e / total for e in energies]

    def pool(self, hiddens: Sequence[torch.Tensor], energies: Sequence[torch.Tensor],
             total: torch.Tensor = None) -> torch.Tensor:
        """Weighted sum of ``hiddens``; ``total`` is the running energy sum if already kept."""
        if len(hiddens) == 0 or len(hiddens) != len(energies):
            raise GraphBuildError(
                f"need matching non-empty hiddens/energies, got {len(hiddens)}/{len(energies)}",
                node=f"{self.name}.pool",
            )
        if total is None:
            total = energies[0]
            for e in energies[1:]:
                total = total + e

        context = None
        for h, e in zip(hiddens, energies):
            ctx = (e / total) * h
            context = ctx if context is None else context + ctx
        return context

    def forward(self, hiddens: Sequence[torch.Tensor]) -> torch.Tensor:
        return self.pool(hiddens, [self.energy(h) for h in hiddens])
