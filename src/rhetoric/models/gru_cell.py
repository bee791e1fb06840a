# gru_cell.py
import torch
import torch.nn as nn

from ..core.errors import GraphBuildError


class GRUCell(nn.Module):
    """
    Gated recurrent cell with separate per-gate matrices.

        z = sigmoid(uz @ prev + wz @ x + bz)        update gate
        r = sigmoid(ur @ prev + wr @ x + br)        reset gate
        c = tanh(u @ (r * prev) + w @ x + b)        candidate memory
        h = z * c + (1 - z) * prev

    Input:  x (input_dim,), prev (hidden_dim,)
    Output: h (hidden_dim,)
    """

    def __init__(self, input_dim: int, hidden_dim: int, name: str = "gru",
                 dtype: torch.dtype = torch.float32):
        super().__init__()
        if input_dim < 1 or hidden_dim < 1:
            raise ValueError(f"{name}: dims must be >= 1, got ({input_dim}, {hidden_dim})")
        self.input_dim = input_dim
        self.hidden_dim = hidden_dim
        self.name = name

        def mat(rows, cols):
            return nn.Parameter(torch.empty(rows, cols, dtype=dtype))

        def vec(n):
            return nn.Parameter(torch.zeros(n, dtype=dtype))

        # candidate memory
        self.u, self.w, self.b = mat(hidden_dim, hidden_dim), mat(hidden_dim, input_dim), vec(hidden_dim)
        # update gate
        self.uz, self.wz, self.bz = mat(hidden_dim, hidden_dim), mat(hidden_dim, input_dim), vec(hidden_dim)
        # reset gate
        self.ur, self.wr, self.br = mat(hidden_dim, hidden_dim), mat(hidden_dim, input_dim), vec(hidden_dim)

        self.register_buffer("one", torch.ones(hidden_dim, dtype=dtype))
        self.reset_parameters()

    def reset_parameters(self):
        for p in (self.u, self.w, self.uz, self.wz, self.ur, self.wr):
            nn.init.normal_(p, mean=0.0, std=0.08)
        for p in (self.b, self.bz, self.br):
            nn.init.zeros_(p)

    def forward(self, x: torch.Tensor, prev: torch.Tensor) -> torch.Tensor:
        if x.shape != (self.input_dim,):
            raise GraphBuildError(
                f"input shape {tuple(x.shape)} != ({self.input_dim},)", node=f"{self.name}.input"
            )
        if prev.shape != (self.hidden_dim,):
            raise GraphBuildError(
                f"previous hidden shape {tuple(prev.shape)} != ({self.hidden_dim},)",
                node=f"{self.name}.prev",
            )

        z = torch.sigmoid(self.uz @ prev + self.wz @ x + self.bz)
        r = torch.sigmoid(self.ur @ prev + self.wr @ x + self.br)
        mem = torch.tanh(self.u @ (r * prev) + self.w @ x + self.b)
        return z * mem + (self.one - z) * prev

    def extra_repr(self) -> str:
        return f"name={self.name}, input_dim={self.input_dim}, hidden_dim={self.hidden_dim}"
