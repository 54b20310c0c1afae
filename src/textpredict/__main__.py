from __future__ import annotations
import argparse, logging, os, sys
from typing import List

from .autocomplete import AutocompleteEngine
from .config import PredictorConfig
from .errors import PredictionError
from .loader import load_corpus
from .predictor import Predictor
from .tagger import nltk_tagger, null_tagger

log = logging.getLogger("textpredict")

# ANSI colours per kind of REPL output
_STYLES = {"title": "1;37", "label": "1;36", "muted": "2;37", "note": "2;36", "error": "2;31"}

def _paint(text: str, style: str) -> str:
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        return text
    return f"\033[{_STYLES[style]}m{text}\033[0m"

def _print_list(title: str, items: List[str]) -> None:
    if not items:
        print(_paint("(no suggestions)", "muted")); return
    print(_paint(title, "title"))
    for i, s in enumerate(items, start=1):
        print(f"{i:<3} {s}")

def _run_query(mode: str, query: str, predictor: Predictor, auto: AutocompleteEngine, length: int) -> None:
    try:
        if mode == "predict":
            seq = predictor.predict_sequence(query, length)
            print(f"{_paint('completion', 'label')}: {seq.completion or '(none)'}")
            _print_list("#   Next token", seq.ranked_tokens[:10])
        else:
            _print_list("#   Next word", auto.get_next_word(query))
            rows = [f"{s.text}  ({s.kind}, {s.frequency})" for s in auto.get_all_suggestions(query)]
            _print_list("#   Completion", rows)
    except PredictionError as e:
        # no suggestion; keep the session alive
        print(_paint(f"(error) {e}", "error"))

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Predictive text REPL (n-gram predictor + autocomplete)")
    parser.add_argument("--corpus", nargs="+", required=True, help="Files or folders of training text")
    parser.add_argument("--mode", choices=["predict", "autocomplete"], default="predict")
    parser.add_argument("--pos", choices=["none", "nltk"], default="none", help="Part-of-speech tagger")
    parser.add_argument("--variance", type=int, default=None)
    parser.add_argument("--length", type=int, default=5, help="Tokens per predicted sequence")
    parser.add_argument("--q", default=None, help="Single query to run once")
    parser.add_argument("--single-line", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose or os.environ.get("TEXTPREDICT_VERBOSE") == "1":
        logging.basicConfig(level=logging.INFO)

    overrides = {} if args.variance is None else {"variance": args.variance}
    config = PredictorConfig.from_env(**overrides)
    tagger = nltk_tagger() if args.pos == "nltk" else null_tagger

    try:
        dataset = load_corpus(args.corpus)
    except FileNotFoundError as e:
        print(f"corpus path not found: {e}", file=sys.stderr)
        return 2

    predictor = Predictor(config, tagger=tagger)
    auto = AutocompleteEngine()
    try:
        predictor.train(dataset)
        auto.train(dataset.text)
    except PredictionError as e:
        print(f"cannot train on {dataset.name}: {e}", file=sys.stderr)
        return 2
    log.info("Trained on %s", dataset.name)

    mode = args.mode
    if args.q is not None:
        _run_query(mode, args.q, predictor, auto, args.length)
        return 0

    style = "single-line" if args.single_line else "incremental"
    print(f"Type text and press Enter (empty to quit).  Type '#' to reset the buffer.  [{mode}, {style} mode]")
    print(_paint("Commands: :mode predict|autocomplete, :clear, :reset", "muted"))

    buffer = ""
    while True:
        try:
            raw = input("> ")
        except EOFError:
            print(); break
        cmd = raw.strip().lower()
        if raw == "":
            print("Goodbye!"); break
        if cmd in ("#", ":reset"):
            buffer = ""; print(_paint("(reset)", "note")); continue
        if cmd in (":clear", ":cls"):
            if sys.stdout.isatty():
                print("\033[2J\033[H", end="", flush=True)
            continue
        if cmd.startswith(":mode"):
            choice = cmd[len(":mode"):].strip()
            if choice in ("predict", "autocomplete"):
                mode = choice; print(_paint(f"(mode {mode})", "note"))
            else:
                print(_paint("usage: :mode predict|autocomplete", "error"))
            continue

        query = raw if args.single_line else (buffer + raw)
        if not args.single_line:
            buffer = query
        _run_query(mode, query, predictor, auto, args.length)
    return 0

if __name__ == "__main__":
    sys.exit(main())
