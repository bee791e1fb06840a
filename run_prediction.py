#!/usr/bin/env python
"""
Classify text with a trained checkpoint.

    python run_prediction.py --checkpoint results/model.pt "Taxes are too high"
    python run_prediction.py --checkpoint results/model.pt --file speech.txt
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from rhetoric.core.data import TARGET_NAMES  # type: ignore
from rhetoric.core.errors import RhetoricError  # type: ignore
from rhetoric.models.rhetoric_gru import RhetoricClassifier  # type: ignore


def main():
    parser = argparse.ArgumentParser(description="Classify political rhetoric")
    parser.add_argument("texts", nargs="*", help="Sentences to classify")
    parser.add_argument(
        "--checkpoint",
        default="results/model.pt",
        help="Path to a model checkpoint (default: results/model.pt)",
    )
    parser.add_argument("--file", default=None, help="Classify every non-empty line of this file")
    parser.add_argument("--device", default="cpu")

    args = parser.parse_args()

    ckpt = Path(args.checkpoint)
    if not ckpt.exists():
        print(f"Checkpoint not found at {ckpt}")
        print("Please run run_experiment.py first.")
        return 1

    texts = list(args.texts)
    if args.file:
        texts += [ln.strip() for ln in Path(args.file).read_text(encoding="utf-8").splitlines() if ln.strip()]
    if not texts:
        parser.error("give at least one sentence or --file")

    model = RhetoricClassifier.load(ckpt, device=args.device)
    print(f"Loaded model from: {ckpt} (vocabulary={len(model.vocab)})")

    header = f"{'Class':12} | " + " | ".join(f"{n:>12}" for n in TARGET_NAMES) + " | Text"
    print(header)
    print("-" * len(header))
    for text in texts:
        try:
            sentence = model.annotator.annotate(text)
            probs = model.predict_proba(sentence)
            label = model.predict_preparsed(sentence)
        except RhetoricError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        cells = " | ".join(f"{p:>12.4f}" for p in probs)
        print(f"{str(label):12} | {cells} | {text[:60]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
