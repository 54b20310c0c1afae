"""
Corpus Loading

Collects training text for the CLI from files and folders. Folders are scanned
recursively for INCLUDE_EXTS files (skipping EXCLUDE_DIRS); files are read in
sorted order so that the same inputs always produce the same corpus.

Key Functions:
    load_corpus(paths): read every matching file into one Dataset
    _iter_text_files(paths): find the files to read
    _best_relpath(p, roots): display name for a file
"""

# src/textpredict/loader.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List

from .config import ENCODING, EXCLUDE_DIRS, INCLUDE_EXTS
from .models import Dataset

log = logging.getLogger(__name__)


def _iter_text_files(paths: Iterable[str]) -> List[Path]:
    """
    Resolve paths into a sorted list of text files.

    A path naming a file is taken as-is whatever its extension; a folder is
    searched recursively for INCLUDE_EXTS files.

    Raises:
        FileNotFoundError: if a path does not exist
    """
    files: List[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_file():
            files.append(p)
            continue
        if not p.is_dir():
            raise FileNotFoundError(raw)
        for f in p.rglob("*"):
            if not f.is_file() or f.suffix.lower() not in INCLUDE_EXTS:
                continue
            if any(part in EXCLUDE_DIRS for part in f.relative_to(p).parts):
                continue
            files.append(f)
    # stable order for reproducibility
    files.sort()
    return files


def _best_relpath(p: Path, roots: Iterable[str]) -> str:
    # choose the first root that works; fallback to basename
    for root in roots:
        try:
            rel = p.relative_to(Path(root))
        except ValueError:
            continue
        if rel.parts:
            return rel.as_posix()
    return p.name


def load_corpus(paths: Iterable[str], *, name: str | None = None) -> Dataset:
    """
    Read every matching file under `paths` into a single Dataset.

    Files are joined with a blank line; undecodable bytes are ignored.

    Example:
        >>> ds = load_corpus(["./books"])
        >>> ds.name
        'books'
    """
    paths = list(paths)
    parts: List[str] = []
    for f in _iter_text_files(paths):
        text = f.read_text(encoding=ENCODING, errors="ignore")
        log.info("Loaded %s (%d chars)", _best_relpath(f, paths), len(text))
        parts.append(text.strip())
    if name is None:
        name = ",".join(Path(p).name for p in paths) or "<empty>"
    return Dataset(name=name, text="\n\n".join(p for p in parts if p))
