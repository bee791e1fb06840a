"""Tests for annotation, vocabulary, example loading and the train/validation partition."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import torch
from rhetoric.core.annotation import ROOT, AnnotatedSentence, Annotator, normalize_text
from rhetoric.core.data import (
    Target,
    collect_paths,
    load_examples,
    partition_paths,
    shuffle_examples,
)
from rhetoric.core.errors import AnnotationError, DataError, EmptySentenceError
from rhetoric.core.vocab import UNKNOWN, Vocabulary, load_embeddings


def _write_corpus(root: Path, n: int = 3):
    for t in Target:
        d = root / t.directory
        d.mkdir(parents=True)
        for i in range(n):
            (d / f"{i}.txt").write_text(f"{t.directory} example number {i}.", encoding="utf-8")


class TestTarget:
    def test_order_and_names(self):
        assert [int(t) for t in Target] == [0, 1, 2]
        assert str(Target.LIBERAL) == "Liberal"
        assert Target.CONSERVATIVE.directory == "conservative"
        assert Target.from_name("neutral") is Target.NEUTRAL

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            Target.from_name("libertarian")


class TestAnnotator:
    def test_root_is_first(self):
        s = Annotator().annotate("Lower taxes now!")
        assert s.tokens[0].value == ROOT
        assert [t.value for t in s.words] == ["lower", "taxes", "now", "!"]
        assert s.words[-1].pos == "PUNCT"

    def test_placeholders(self):
        s = normalize_text("Visit https://example.com or mail a@b.org in 2024")
        assert "<url>" in s and "<email>" in s and "0000" not in s
        words = [t.value for t in Annotator().annotate("see www.x.com").words]
        assert "<url>" in words

    def test_empty_text_has_only_root(self):
        s = Annotator().annotate("   ")
        assert len(s) == 1 and s.words == ()

    def test_stage_failure(self):
        class Unprintable:
            def __str__(self):
                raise TypeError("no text")

        with pytest.raises(AnnotationError) as exc:
            Annotator().annotate(Unprintable(), "bad.txt")
        assert exc.value.name == "bad.txt"
        assert exc.value.stage == "normalise"

    def test_from_words(self):
        s = AnnotatedSentence.from_words(["a", "b"])
        assert len(s) == 3
        assert s.value_string() == "a b"


class TestVocabulary:
    def test_unknown_always_present(self):
        v = Vocabulary(["a", "b"])
        assert UNKNOWN in v
        assert v.id("a") == (0, True)
        assert v.id("zzz") == (v.unknown_id, False)
        assert v.word_id("zzz") == v.unknown_id

    def test_explicit_unknown_keeps_position(self):
        v = Vocabulary(["a", "b", UNKNOWN])
        assert len(v) == 3 and v.unknown_id == 2

    def test_build_min_freq(self):
        sents = [AnnotatedSentence.from_words(["x", "y"]), AnnotatedSentence.from_words(["x"])]
        v = Vocabulary.build(sents, min_freq=2)
        assert "x" in v and "y" not in v
        assert v.unknown_id == 0
        assert ROOT not in v

    def test_load_embeddings(self, tmp_path):
        path = tmp_path / "glove.txt"
        path.write_text("a 1 2 3\nnot-in-vocab 4 5 6\nshort 1\n", encoding="utf-8")
        v = Vocabulary(["a", "b"])
        mat = load_embeddings(str(path), v, 3)
        assert mat.shape == (len(v), 3)
        assert torch.equal(mat[v.word_id("a")], torch.tensor([1.0, 2.0, 3.0]))


class TestPartition:
    def test_20_per_class(self):
        paths = {t: [Path(f"{t.directory}/{i}.txt") for i in range(20)] for t in Target}
        train, val = partition_paths(paths, ratio=0.85, seed=1)
        assert len(train) == 51 and len(val) == 9
        for t in Target:
            assert sum(1 for _, tt in train if tt == t) == 17
            assert sum(1 for _, tt in val if tt == t) == 3
        assert not {p for p, _ in train} & {p for p, _ in val}

    def test_is_seeded(self):
        paths = {t: [Path(f"{t.directory}/{i}.txt") for i in range(10)] for t in Target}
        assert partition_paths(paths, seed=3) == partition_paths(paths, seed=3)

    def test_tiny_class_goes_to_training(self):
        paths = {Target.NEUTRAL: [Path("n.txt")], Target.LIBERAL: [], Target.CONSERVATIVE: []}
        train, val = partition_paths(paths)
        assert train == [(Path("n.txt"), Target.NEUTRAL)] and val == []

    def test_bad_ratio(self):
        with pytest.raises(ValueError):
            partition_paths({}, ratio=0.0)


class TestLoading:
    def test_collect_and_load(self, tmp_path):
        _write_corpus(tmp_path)
        paths = collect_paths(tmp_path)
        assert all(len(ps) == 3 for ps in paths.values())
        pairs = [(p, t) for t, ps in paths.items() for p in ps]
        examples = load_examples(pairs)
        assert len(examples) == 9
        assert examples[0].sentence.words[0].value == "neutral"
        assert examples[-1].target == Target.CONSERVATIVE

    def test_missing_class_directory(self, tmp_path):
        (tmp_path / "neutral").mkdir()
        with pytest.raises(DataError):
            collect_paths(tmp_path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataError):
            load_examples([(tmp_path / "nope.txt", Target.LIBERAL)])

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty.txt"
        p.write_text("\n", encoding="utf-8")
        with pytest.raises(EmptySentenceError):
            load_examples([(p, Target.NEUTRAL)])

    def test_truncates_to_max_len(self, tmp_path):
        p = tmp_path / "long.txt"
        p.write_text(" ".join(f"w{i}" for i in range(60)), encoding="utf-8")
        (ex,) = load_examples([(p, Target.NEUTRAL)], max_len=45)
        assert len(ex.sentence.words) == 45
        assert ex.sentence.tokens[0].value == ROOT

    def test_shuffle_in_place(self, tmp_path):
        import random

        _write_corpus(tmp_path, n=5)
        paths = collect_paths(tmp_path)
        examples = load_examples([(p, t) for t, ps in paths.items() for p in ps])
        before = list(examples)
        shuffle_examples(examples, random.Random(0))
        assert sorted(map(id, before)) == sorted(map(id, examples))
