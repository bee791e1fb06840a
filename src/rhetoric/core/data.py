#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Example data: labels, on-disk layout, train/validation partition and loading.

Examples live on disk grouped by class:

    <data_dir>/neutral/*.txt
    <data_dir>/liberal/*.txt
    <data_dir>/conservative/*.txt

Each file is one plaintext example. Each class's file list is shuffled and
split independently, so class balance is preserved across train/validation.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from sklearn.model_selection import train_test_split

from .annotation import AnnotatedSentence, Annotator
from .errors import DataError, EmptySentenceError

SPLIT_RATIO = 0.85
MAX_QUERY = 45


class Target(IntEnum):
    NEUTRAL = 0
    LIBERAL = 1
    CONSERVATIVE = 2

    def __str__(self) -> str:
        return self.name.capitalize()

    @property
    def directory(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "Target":
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown target: {name!r}") from None


NUM_TARGETS = len(Target)
TARGET_NAMES = [str(t) for t in Target]


@dataclass(frozen=True)
class Example:
    sentence: AnnotatedSentence
    target: Target
    source: Optional[str] = None


def collect_paths(data_dir, pattern: str = "*.txt") -> Dict[Target, List[Path]]:
    data_dir = Path(data_dir)
    out: Dict[Target, List[Path]] = {}
    for t in Target:
        d = data_dir / t.directory
        if not d.is_dir():
            raise DataError(f"Missing class directory for {t}: {d}")
        out[t] = sorted(d.glob(pattern))
    return out


def partition_paths(
    paths_by_class: Dict[Target, Sequence[Path]],
    ratio: float = SPLIT_RATIO,
    seed: int = 1337,
) -> Tuple[List[Tuple[Path, Target]], List[Tuple[Path, Target]]]:
    """Split each class independently: floor(n * ratio) files go to training."""
    if not 0.0 < ratio <= 1.0:
        raise ValueError(f"split ratio must be in (0, 1], got {ratio}")
    train, val = [], []
    for t in Target:
        paths = list(paths_by_class.get(t, []))
        # small epsilon so 0.85 * 20 is not floored to 16
        n_train = int(len(paths) * ratio + 1e-9)
        if n_train == 0 or n_train == len(paths):
            tr, va = paths, []
        else:
            tr, va = train_test_split(
                paths, train_size=n_train, random_state=seed + int(t), shuffle=True
            )
        train.extend((p, t) for p in tr)
        val.extend((p, t) for p in va)
    return train, val


def load_one(path, target: Target, annotate: Callable, max_len: Optional[int] = MAX_QUERY) -> Example:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise DataError(f"Cannot read example {path}: {e}") from e
    sentence = annotate(text, str(path))
    if not sentence.words:
        raise EmptySentenceError(f"Example {path} has no tokens")
    if max_len is not None and len(sentence.words) > max_len:
        sentence = AnnotatedSentence(sentence.tokens[: max_len + 1])
    return Example(sentence, target, str(path))


def load_examples(
    pairs: Sequence[Tuple[Path, Target]],
    annotator: Optional[Annotator] = None,
    max_len: Optional[int] = MAX_QUERY,
) -> List[Example]:
    annotator = annotator or Annotator()
    return [load_one(p, t, annotator.annotate, max_len) for p, t in pairs]


def shuffle_examples(examples: List[Example], rng: Optional[random.Random] = None) -> None:
    (rng or random).shuffle(examples)
