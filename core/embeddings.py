"""
Embeddings
==========
Vector math and sentence encoding over a word embedding table.

A sentence vector is the sum of the embeddings of its known words divided
by the total number of words, so sentences with many unknown words end up
with a smaller magnitude.
"""

import numpy as np
from typing import Dict, Optional


EmbeddingTable = Dict[str, np.ndarray]


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """
    Cosine of the angle between two vectors, in [-1, 1].

    Only the overlapping prefix of the two vectors is compared. Empty or
    zero-norm vectors have no similarity with anything (0.0).
    """
    n = min(len(vec1), len(vec2))
    if n == 0:
        return 0.0

    a = np.asarray(vec1[:n], dtype=np.float64)
    b = np.asarray(vec2[:n], dtype=np.float64)

    norm_a = float(np.dot(a, a))
    norm_b = float(np.dot(b, b))
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(a, b)) / (np.sqrt(norm_a) * np.sqrt(norm_b))
    return float(np.clip(similarity, -1.0, 1.0))


def add_vectors(a: Optional[np.ndarray], b: np.ndarray) -> np.ndarray:
    """Add b into a. An empty a becomes a copy of b."""
    b = np.asarray(b, dtype=np.float64)
    if a is None or len(a) == 0:
        return b.copy()

    n = min(len(a), len(b))
    a[:n] += b[:n]
    return a


def average_vector(vec: Optional[np.ndarray], count: int) -> np.ndarray:
    """Divide every component by count (no-op when count is 0)"""
    if vec is None:
        return np.zeros(0, dtype=np.float64)
    if count == 0:
        return vec
    return vec / float(count)


def sentence_vector(sentence: str, embeddings: EmbeddingTable) -> np.ndarray:
    """
    Encode a sentence as the average of its word embeddings.

    Words are split on whitespace after lowercasing, punctuation stays
    attached. Unknown words contribute nothing to the sum but still count
    in the divisor.
    """
    words = sentence.lower().split()

    vec = None
    for word in words:
        embedding = embeddings.get(word)
        if embedding is not None:
            vec = add_vectors(vec, embedding)

    return average_vector(vec, len(words))


def embedding_dimension(embeddings: EmbeddingTable) -> int:
    """Dimension shared by the table, 0 when empty"""
    for vector in embeddings.values():
        return len(vector)
    return 0
