# classifier.py
import torch
import torch.nn as nn


class ClassifierHead(nn.Module):
    """probs = softmax(W_p @ context), W_p: (num_classes, hidden_dim)."""

    def __init__(self, hidden_dim: int, num_classes: int, dtype: torch.dtype = torch.float32):
        super().__init__()
        self.w = nn.Parameter(torch.empty(num_classes, hidden_dim, dtype=dtype))
        nn.init.xavier_uniform_(self.w)

    def logits(self, context: torch.Tensor) -> torch.Tensor:
        return self.w @ context

    def forward(self, context: torch.Tensor) -> torch.Tensor:
        return torch.softmax(self.logits(context), dim=-1)
