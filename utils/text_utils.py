"""Helpers for displaying the free-text fields of statuses and assessments."""

from __future__ import annotations
import re
from typing import List, Optional

_BULLET_PREFIX = re.compile(r'^[-*•·\d\s.)]+')
_POINT_DELIMITERS = re.compile(r'\n|•|·|\d+\.|-')
_SENTENCE_END = re.compile(r'\.\s+|\.$')


def clean_bullets(text: Optional[str]) -> List[str]:
    """Split text into lines, stripping leading bullet and numbering markers."""
    if not text:
        return []
    lines = (_BULLET_PREFIX.sub('', line).strip() for line in text.split('\n'))
    return [line for line in lines if line]


def split_into_points(text: Optional[str]) -> List[str]:
    """Split free text into display points: first on bullets/numbering, then on sentences."""
    if not text or not text.strip():
        return []

    points = []
    for chunk in _POINT_DELIMITERS.split(text):
        chunk = chunk.strip()
        if not chunk:
            continue
        for sentence in _SENTENCE_END.split(chunk):
            sentence = sentence.strip()
            if sentence:
                points.append(sentence)
    return points


def truncate_text(text: Optional[str], max_length: int = 100) -> str:
    """Cut text to max_length characters, appending '...' when shortened."""
    if not text:
        return ''
    return f"{text[:max_length]}..." if len(text) > max_length else text
