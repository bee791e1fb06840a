# vocab.py
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

import torch

from .annotation import AnnotatedSentence

UNKNOWN = "-UNKNOWN-"


class Vocabulary:
    """Surface form <-> id mapping with a reserved, always-present unknown id."""

    def __init__(self, words: Iterable[str] = ()):
        self.itos: List[str] = []
        self.stoi: Dict[str, int] = {}
        for w in words:
            self.add(w)
        if UNKNOWN not in self.stoi:
            self.add(UNKNOWN)

    def add(self, word: str) -> int:
        if word not in self.stoi:
            self.stoi[word] = len(self.itos)
            self.itos.append(word)
        return self.stoi[word]

    @classmethod
    def build(
        cls,
        sentences: Iterable[AnnotatedSentence],
        min_freq: int = 1,
        max_size: Optional[int] = None,
    ) -> "Vocabulary":
        cnt = Counter()
        for s in sentences:
            for tok in s.words:
                cnt[tok.value] += 1
        items = [(w, f) for w, f in cnt.items() if f >= min_freq and w != UNKNOWN]
        items.sort(key=lambda x: (-x[1], x[0]))
        if max_size:
            items = items[: max(0, max_size - 1)]
        return cls([UNKNOWN] + [w for w, _ in items])

    def id(self, word: str) -> Tuple[int, bool]:
        if word in self.stoi:
            return self.stoi[word], True
        return self.unknown_id, False

    def word_id(self, word: str) -> int:
        return self.stoi.get(word, self.unknown_id)

    @property
    def unknown_id(self) -> int:
        return self.stoi[UNKNOWN]

    def __len__(self) -> int:
        return len(self.itos)

    def __contains__(self, word: str) -> bool:
        return word in self.stoi


def load_embeddings(
    path: Optional[str],
    vocab: Vocabulary,
    emb_dim: int,
    dtype: torch.dtype = torch.float32,
) -> torch.Tensor:
    """Load a GloVe-style text file aligned to ``vocab``; OOV rows stay random."""
    mat = torch.randn(len(vocab), emb_dim, dtype=dtype) * 0.1
    if path is None:
        return mat
    found = 0
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            parts = line.rstrip().split(" ")
            if len(parts) < emb_dim + 1:
                continue
            w = parts[0]
            if w in vocab:
                mat[vocab.stoi[w]] = torch.tensor(
                    [float(x) for x in parts[1 : 1 + emb_dim]], dtype=dtype
                )
                found += 1
    print(f"[vocab] embeddings loaded from {path}: {found}/{len(vocab)} words found")
    return mat
