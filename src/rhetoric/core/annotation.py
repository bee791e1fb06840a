#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Annotation boundary: raw text -> AnnotatedSentence.

The classifier never consumes raw text directly. Text is normalised
(HTML/url/email/user/digits -> placeholders, lowercase/NFKC), lexed into
word and punctuation tokens, then tagged with light metadata. Every
sentence starts with a root placeholder token, the same way dependency
parser output does; the encoder skips it.
"""
from __future__ import annotations

import html
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

import regex as re

from .errors import AnnotationError

ROOT = "-ROOT-"

TAG_RE = re.compile(r"<[^>]+>")
URL_RE = re.compile(r"(https?://\S+|www\.\S+)")
EMAIL_RE = re.compile(r"\b[\w\.-]+@[\w\.-]+\.\w+\b")
USER_RE = re.compile(r"(^|[^A-Za-z0-9_])@([A-Za-z0-9_]{1,15})")
DIGIT_RE = re.compile(r"\d+")
# placeholders first, then words (keeping inner ' and -), then single symbols
TOKEN_RE = re.compile(r"<(?:url|email|user)>|\w[\w'-]*|[^\w\s]")
PUNCT_RE = re.compile(r"^\p{P}+$")


@dataclass(frozen=True)
class Token:
    value: str
    lemma: Optional[str] = None
    pos: Optional[str] = None
    cluster: Optional[int] = None


@dataclass(frozen=True)
class AnnotatedSentence:
    """Ordered tokens; index 0 is always the root placeholder."""

    tokens: Tuple[Token, ...]

    def __post_init__(self):
        if not self.tokens or self.tokens[0].value != ROOT:
            object.__setattr__(self, "tokens", (Token(ROOT, ROOT, "ROOT"),) + tuple(self.tokens))

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "AnnotatedSentence":
        return cls(tuple(Token(w, w.lower()) for w in words))

    @property
    def words(self) -> Tuple[Token, ...]:
        return self.tokens[1:]

    def value_string(self) -> str:
        return " ".join(t.value for t in self.words)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)


def strip_control_chars(s: str) -> str:
    return "".join(ch for ch in s if ch.isprintable())


def normalize_text(text: str) -> str:
    s = str(text)
    s = html.unescape(s).replace("<br />", " ")
    s = TAG_RE.sub(" ", s)
    s = unicodedata.normalize("NFKC", s)
    s = URL_RE.sub(" <URL> ", s)
    s = EMAIL_RE.sub(" <EMAIL> ", s)
    s = USER_RE.sub(r"\1 <USER> ", s)
    s = DIGIT_RE.sub("0", s)
    s = s.lower()
    s = strip_control_chars(s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def lex(text: str) -> list:
    return TOKEN_RE.findall(text)


def coarse_pos(word: str) -> str:
    if word.isdigit():
        return "NUM"
    if PUNCT_RE.match(word):
        return "PUNCT"
    if not any(ch.isalnum() for ch in word):
        return "SYM"
    return "X"


def tag(words: Iterable[str]) -> Tuple[Token, ...]:
    return tuple(Token(w, lemma=w.strip("'-") or w, pos=coarse_pos(w)) for w in words)


class Annotator:
    """Runs normalise -> lex -> tag; the first failing stage is reported."""

    def __init__(self, normalize: bool = True):
        self.normalize = normalize

    def annotate(self, text: str, name: str = "<input>") -> AnnotatedSentence:
        try:
            s = normalize_text(text) if self.normalize else str(text)
        except Exception as e:
            raise AnnotationError("normalise", name, e) from e
        try:
            words = lex(s)
        except Exception as e:
            raise AnnotationError("lex", name, e) from e
        try:
            tokens = tag(words)
        except Exception as e:
            raise AnnotationError("tag", name, e) from e
        return AnnotatedSentence(tokens)

    __call__ = annotate
