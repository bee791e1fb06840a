# rhetoric_gru.py
import random
import time
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import torch
import torch.nn as nn

from ..core.annotation import AnnotatedSentence, Annotator
from ..core.data import Example, NUM_TARGETS, Target, shuffle_examples
from ..core.errors import EmptySentenceError, GraphBuildError
from ..core.evaluation import evaluate
from ..core.vocab import Vocabulary, load_embeddings
from .attention import FeatureAttention
from .classifier import ClassifierHead
from .gru_cell import GRUCell

GRU_DEFAULTS: Dict[str, Any] = {
    "embedding_dim": 100,
    "hidden_sizes": (100, 30),
    "dropout": 0.5,
    "solver": "adagrad",
    "lr": 0.05,
    "clip": 3.0,
    "l2": 1e-6,
    "epochs": 5,
    "max_len": 45,
    "min_freq": 1,
    "max_vocab_size": None,
    "seed": 1337,
    "dtype": "float32",
    "device": "cpu",
    "emb_path": None,
    "freeze_emb": False,
}


class RhetoricNet(nn.Module):
    """
    Embedding -> stacked GRU cells (one token at a time) -> feature attention
    pooling -> linear + softmax.

    Input:  sequence of word ids (root token already dropped)
    Output: (num_classes,) probability vector
    """

    def __init__(self, vocab_size: int, embedding_dim: int, hidden_sizes=(100, 30),
                 num_classes: int = NUM_TARGETS, dropout: float = 0.5,
                 dtype: torch.dtype = torch.float32):
        super().__init__()
        hidden_sizes = tuple(int(h) for h in hidden_sizes)
        if not hidden_sizes:
            raise ValueError("hidden_sizes must name at least one layer")
        self.hidden_sizes = hidden_sizes

        self.emb = nn.Embedding(vocab_size, embedding_dim, dtype=dtype)
        nn.init.normal_(self.emb.weight, std=0.1)

        widths = (embedding_dim,) + hidden_sizes
        self.layers = nn.ModuleList(
            GRUCell(widths[i], widths[i + 1], name=f"gru-{i}", dtype=dtype)
            for i in range(len(hidden_sizes))
        )
        self.drop = nn.Dropout(dropout)
        self.attn = FeatureAttention(hidden_sizes[-1], dtype=dtype)
        self.head = ClassifierHead(hidden_sizes[-1], num_classes, dtype=dtype)

        # fixed zero "previous hidden" per layer; read, never written
        for i, h in enumerate(hidden_sizes):
            self.register_buffer(f"prev{i}", torch.zeros(h, dtype=dtype))

    def set_embeddings(self, weights: torch.Tensor):
        if tuple(weights.shape) != tuple(self.emb.weight.shape):
            raise ValueError(
                f"embedding table shape {tuple(weights.shape)} != {tuple(self.emb.weight.shape)}"
            )
        with torch.no_grad():
            self.emb.weight.copy_(weights)

    def initial_states(self) -> List[torch.Tensor]:
        return [getattr(self, f"prev{i}") for i in range(len(self.layers))]

    def step(self, word_id: int, prevs: Sequence[torch.Tensor]):
        """One token: returns (new state per layer, attention energy of the top state)."""
        x = self.emb.weight[word_id]
        states = []
        for i, (cell, prev) in enumerate(zip(self.layers, prevs)):
            if i > 0:
                x = self.drop(x)
            x = cell(x, prev)
            states.append(x)
        return states, self.attn.energy(x)

    def forward(self, word_ids: Sequence[int]) -> torch.Tensor:
        if len(word_ids) == 0:
            raise EmptySentenceError("sentence has no tokens after the root")

        prevs = self.initial_states()
        hiddens, energies = [], []
        running_sum = None
        for wid in word_ids:
            prevs, e = self.step(int(wid), prevs)
            hiddens.append(prevs[-1])
            energies.append(e)
            running_sum = e if running_sum is None else running_sum + e

        context = self.attn.pool(hiddens, energies, running_sum)
        return self.head(context)


class RhetoricClassifier:
    """Owns vocabulary, network and solver; trains one example at a time."""

    def __init__(self, vocab: Optional[Vocabulary] = None,
                 embeddings: Optional[torch.Tensor] = None,
                 annotator: Optional[Annotator] = None, **params: Any):
        self.p = {**GRU_DEFAULTS, **params}
        self.p["hidden_sizes"] = tuple(self.p["hidden_sizes"])
        self.device = torch.device(self.p["device"])
        self.dtype = getattr(torch, self.p["dtype"])
        self.annotator = annotator or Annotator()
        self.vocab = None
        self.net = None
        self.optim = None
        if vocab is not None:
            self.build(vocab, embeddings)

    # ---------- construction ----------
    def build(self, vocab: Vocabulary, embeddings: Optional[torch.Tensor] = None):
        torch.manual_seed(self.p["seed"])
        emb_dim = int(self.p["embedding_dim"])
        if embeddings is None and self.p.get("emb_path"):
            embeddings = load_embeddings(self.p["emb_path"], vocab, emb_dim, self.dtype)
        if embeddings is not None:
            if embeddings.dim() != 2 or embeddings.shape[0] != len(vocab):
                raise ValueError(
                    f"embedding table shape {tuple(embeddings.shape)} does not match "
                    f"vocabulary size {len(vocab)}"
                )
            if embeddings.shape[1] != emb_dim:
                raise ValueError(
                    f"embedding table width {embeddings.shape[1]} != embedding_dim {emb_dim}"
                )

        self.vocab = vocab
        self.net = RhetoricNet(
            vocab_size=len(vocab),
            embedding_dim=emb_dim,
            hidden_sizes=self.p["hidden_sizes"],
            num_classes=NUM_TARGETS,
            dropout=self.p["dropout"],
            dtype=self.dtype,
        ).to(self.device)
        if embeddings is not None:
            self.net.set_embeddings(embeddings.to(device=self.device, dtype=self.dtype))
        if self.p.get("freeze_emb", False):
            self.net.emb.weight.requires_grad_(False)
        self.optim = self._make_solver()
        return self

    def _make_solver(self) -> torch.optim.Optimizer:
        params = [p for p in self.net.parameters() if p.requires_grad]
        solver = str(self.p.get("solver", "adagrad")).lower()
        lr, l2 = self.p.get("lr", 0.05), self.p.get("l2", 0.0)
        if solver == "adagrad":
            return torch.optim.Adagrad(params, lr=lr, weight_decay=l2)
        if solver == "adam":
            return torch.optim.Adam(params, lr=lr, weight_decay=l2)
        raise ValueError(f"Unknown solver: {solver}")

    def _require_built(self):
        if self.net is None:
            raise RuntimeError("model has no vocabulary yet; call fit() or build() first")

    def learnables(self) -> Dict[str, nn.Parameter]:
        self._require_built()
        return {n: p for n, p in self.net.named_parameters() if p.requires_grad}

    # ---------- encoding ----------
    def word_id(self, token) -> int:
        return self.vocab.word_id(getattr(token, "value", token))

    def sentence_ids(self, sentence: AnnotatedSentence) -> List[int]:
        return [self.word_id(t) for t in sentence.words]

    def forward(self, sentence: AnnotatedSentence) -> torch.Tensor:
        self._require_built()
        ids = self.sentence_ids(sentence)
        try:
            return self.net(ids)
        except GraphBuildError:
            raise
        except (RuntimeError, IndexError) as e:
            raise GraphBuildError(str(e), node="forward") from e

    def cost(self, sentence: AnnotatedSentence, target: Target) -> torch.Tensor:
        probs = self.forward(sentence)
        return -torch.log(probs[int(target)])

    # ---------- api ----------
    def train_one(self, example: Example) -> float:
        self._require_built()
        self.net.train()
        self.optim.zero_grad()
        cost = self.cost(example.sentence, example.target)
        try:
            cost.backward()
        except RuntimeError as e:
            raise GraphBuildError(str(e), node="backward") from e
        c = float(cost.item())

        clip = self.p.get("clip")
        if clip:
            nn.utils.clip_grad_value_(self.net.parameters(), clip)
        self.optim.step()
        return c

    def train_epoch(self, examples: Sequence[Example]) -> float:
        if len(examples) == 0:
            raise ValueError("cannot train on an empty example set")
        costs = [self.train_one(ex) for ex in examples]
        return float(np.mean(costs))

    def predict_proba(self, sentence: AnnotatedSentence) -> np.ndarray:
        self._require_built()
        self.net.eval()
        with torch.no_grad():
            probs = self.forward(sentence)
        return probs.cpu().numpy()

    def predict_preparsed(self, sentence: AnnotatedSentence) -> Target:
        # np.argmax returns the first maximum, i.e. the lowest class index on ties
        return Target(int(np.argmax(self.predict_proba(sentence))))

    def predict(self, text: str) -> Target:
        return self.predict_preparsed(self.annotator.annotate(text))

    def fit(self, train: Sequence[Example], validation: Sequence[Example] = (),
            epochs: Optional[int] = None) -> List[Dict[str, Any]]:
        train = list(train)
        if self.net is None:
            vocab = Vocabulary.build(
                (ex.sentence for ex in train),
                min_freq=self.p.get("min_freq", 1),
                max_size=self.p.get("max_vocab_size"),
            )
            print(f"[GRU] vocabulary built from training set: {len(vocab)} words")
            self.build(vocab)

        epochs = epochs or self.p.get("epochs", 5)
        rng = random.Random(self.p["seed"])
        history = []
        print(f"[GRU] device={self.device}, train={len(train)}, validation={len(validation)}")
        for ep in range(epochs):
            shuffle_examples(train, rng)
            start = time.time()
            avg_cost = self.train_epoch(train)
            row: Dict[str, Any] = {"epoch": ep, "cost": avg_cost, "seconds": time.time() - start}

            if len(validation):
                res = evaluate(self, validation)
                row.update(accuracy=res.accuracy, macro_f1=res.macro_f1,
                           confusion=res.confusion.tolist())
                print(f"[GRU] {ep} | {avg_cost:.6f} | {res.accuracy:.6f} | {res.macro_f1:.6f}")
                if ep % 10 == 0 or ep < 10:
                    print(res.confusion)
            else:
                print(f"[GRU] {ep} | {avg_cost:.6f}")
            history.append(row)
        return history

    # ---------- persistence ----------
    def save(self, path):
        self._require_built()
        state = {
            "params": dict(self.p),
            "vocab": list(self.vocab.itos),
            "model_state_dict": self.net.state_dict(),
            "optimizer_state_dict": self.optim.state_dict(),
            "timestamp": time.time(),
        }
        torch.save(state, path)

    @classmethod
    def load(cls, path, device: str = "cpu") -> "RhetoricClassifier":
        checkpoint = torch.load(path, map_location=device, weights_only=False)
        params = dict(checkpoint["params"])
        params.update(device=device, emb_path=None)
        model = cls(Vocabulary(checkpoint["vocab"]), **params)
        model.net.load_state_dict(checkpoint["model_state_dict"])
        if "optimizer_state_dict" in checkpoint:
            model.optim.load_state_dict(checkpoint["optimizer_state_dict"])
        return model


def create_gru_factory():
    def factory(params: Dict[str, Any]):
        return RhetoricClassifier(**params)
    return factory
