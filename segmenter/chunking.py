"""
Chunking and emission of segmentation documents.

Rules:
- Row sets at or under the threshold stay whole.
- "halve" splits once into ceil(n/2) + remainder; it does not bound chunk
  size for n > 2 * threshold.
- "bounded" splits into ceil(n/threshold) contiguous, near-equal chunks.
- Artifact names depend only on brand, category and 1-based chunk index.
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import List, Sequence, TypeVar

from .errors import ConfigError, WriteError
from .models import SegmentationDocument
from .rules import CHUNK_THRESHOLD, OUTPUT_ENCODING, SPLIT_BOUNDED, SPLIT_HALVE, SPLIT_POLICY

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk_size(n: int, threshold: int = CHUNK_THRESHOLD, policy: str = SPLIT_POLICY) -> int:
    if n <= threshold:
        return max(n, 1)
    if policy == SPLIT_HALVE:
        return math.ceil(n / 2)
    if policy == SPLIT_BOUNDED:
        return math.ceil(n / math.ceil(n / threshold))
    raise ConfigError(f"unknown split policy: {policy!r}")


def split_rows(rows: Sequence[T], threshold: int = CHUNK_THRESHOLD, policy: str = SPLIT_POLICY) -> List[List[T]]:
    items = list(rows)
    if len(items) <= threshold:
        return [items]
    size = chunk_size(len(items), threshold, policy)
    return [items[i : i + size] for i in range(0, len(items), size)]


def _slug(text: str) -> str:
    return text.lower().replace(" ", "_")


def artifact_name(brand: str, category: str, index: int) -> str:
    return f"{_slug(brand)}_{_slug(category)}_part_{index}.json"


def ensure_output_dir(output_dir: Path) -> Path:
    path = Path(output_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(str(path), detail=str(exc)) from exc
    return path


def write_document(document: SegmentationDocument, path: Path) -> Path:
    """Write via a sibling temp file so readers never see a partial document."""
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(document.to_json() + "\n", encoding=OUTPUT_ENCODING)
        os.replace(tmp_path, path)
    except OSError as exc:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise WriteError(str(path), detail=str(exc)) from exc
    logger.info("Saved %s", path)
    return path
