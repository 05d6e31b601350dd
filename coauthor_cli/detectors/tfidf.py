"""
Line-level TF-IDF Vectorizer
────────────────────────────
Every added line is treated as one document. A single vocabulary is built over
the snapshot lines and the current diff lines together, so that all vectors
produced in one run live in the same space and can be compared directly.

The tokenizer is a lexical approximation shared by every language:
identifiers, a handful of two-character operators, and structural punctuation.
"""

import re
from types import MappingProxyType
from collections import Counter
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, List, Mapping, Tuple

import numpy as np

_TOKEN_PATTERN = re.compile(r"[a-z0-9_]+|=>|==|!=|<=|>=|&&|\|\||[{}()\[\],.;]", re.IGNORECASE)


def tokenize(text: str) -> List[str]:
    """Split text into lowercase tokens; unmatched characters are dropped."""
    if not text:
        return []
    return [token.lower() for token in _TOKEN_PATTERN.findall(text)]


@dataclass(frozen=True)
class Vocabulary:
    """Token index and document frequencies for one attribution run."""

    token_index: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    document_frequency: Tuple[int, ...] = ()
    document_count: int = 0

    @property
    def size(self) -> int:
        return len(self.token_index)

    @cached_property
    def idf(self) -> np.ndarray:
        # Smoothed: ln((N + 1) / (df + 1)) + 1, never below 1
        df = np.asarray(self.document_frequency, dtype=np.float64)
        return np.log((self.document_count + 1) / (df + 1)) + 1.0


def build_vocabulary(documents: Iterable[str]) -> Vocabulary:
    """
    Assign each distinct token an index in first-seen order and count the
    documents it appears in. Repeats inside one document count once.
    """
    token_index = {}
    document_frequency = []
    document_count = 0

    for doc in documents:
        document_count += 1
        # dict.fromkeys keeps first-seen order, a plain set would not
        for token in dict.fromkeys(tokenize(doc)):
            index = token_index.get(token)
            if index is None:
                index = len(token_index)
                token_index[token] = index
                document_frequency.append(0)
            document_frequency[index] += 1

    return Vocabulary(
        token_index=MappingProxyType(token_index),
        document_frequency=tuple(document_frequency),
        document_count=document_count,
    )


def vectorize(text: str, vocabulary: Vocabulary) -> np.ndarray:
    """
    Dense TF-IDF vector of `text` over `vocabulary`.

    An empty vocabulary yields an empty vector. A line with no tokens yields a
    zero vector of full length. Tokens the vocabulary has never seen are ignored.
    """
    size = vocabulary.size
    if size == 0 or vocabulary.document_count == 0:
        return np.zeros(0, dtype=np.float64)

    vector = np.zeros(size, dtype=np.float64)
    tokens = tokenize(text)
    if not tokens:
        return vector

    total = len(tokens)
    idf = vocabulary.idf
    for token, count in Counter(tokens).items():
        index = vocabulary.token_index.get(token)
        if index is None:
            continue
        vector[index] = (count / total) * idf[index]
    return vector
