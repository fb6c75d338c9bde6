"""
Knowledge Base
==============
Curated question/answer entries searched by sentence-vector similarity,
plus pairs learned at runtime that are matched by exact question text.

- Curated entries are encoded once when added and never re-encoded
- Search is an exhaustive scan (the base is expected to stay small)
- Learned pairs have no vector; lookup is a byte-for-byte key match
- Both collections sit behind a single shared/exclusive lock
"""

import numpy as np
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field

import structlog

from core.embeddings import EmbeddingTable, cosine_similarity, sentence_vector
from .locks import ReadWriteLock


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class KnowledgeEntry:
    """A curated question, its answer and the question's sentence vector"""
    question: str
    answer: str
    vector: np.ndarray = field(compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'question': self.question,
            'answer': self.answer,
            'dimension': len(self.vector)
        }


class KnowledgeBase:
    """
    Thread-safe store of curated and learned question/answer pairs.

    Entries keep insertion order and are never removed or reordered.
    Adding the same question twice stores two competing entries.
    """

    def __init__(self):
        self._entries: List[KnowledgeEntry] = []
        self._learned: Dict[str, str] = {}

        # Thread safety
        self._lock = ReadWriteLock()

    def add_entry(self, question: str, answer: str, embeddings: EmbeddingTable) -> KnowledgeEntry:
        """Encode the question and append a new curated entry"""
        vector = sentence_vector(question, embeddings)
        vector.setflags(write=False)
        entry = KnowledgeEntry(question=question, answer=answer, vector=vector)

        with self._lock.write_locked():
            self._entries.append(entry)

        logger.debug("knowledge_entry_added", question=question, dimension=len(vector))
        return entry

    def find_best_match(self, question: str, embeddings: EmbeddingTable) -> Tuple[str, float]:
        """
        Find the curated answer whose question is most similar to the query.

        Returns ("", 0.0) when the base is empty or nothing scores above 0.
        On a tie the earliest entry wins.
        """
        query_vec = sentence_vector(question, embeddings)

        best_score = 0.0
        best_answer = ""

        with self._lock.read_locked():
            for entry in self._entries:
                score = cosine_similarity(query_vec, entry.vector)
                if score > best_score:
                    best_score = score
                    best_answer = entry.answer

        return best_answer, best_score

    def learn(self, question: str, answer: str) -> None:
        """Store or overwrite a learned answer for the exact question text"""
        with self._lock.write_locked():
            replaced = question in self._learned
            self._learned[question] = answer

        logger.info("learned_entry_stored", question=question, replaced=replaced)

    def get_learned(self, question: str) -> Optional[str]:
        """Learned answer for exactly this question text, if any"""
        with self._lock.read_locked():
            return self._learned.get(question)

    @property
    def entries(self) -> Tuple[KnowledgeEntry, ...]:
        with self._lock.read_locked():
            return tuple(self._entries)

    @property
    def learned_count(self) -> int:
        with self._lock.read_locked():
            return len(self._learned)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get knowledge base statistics"""
        with self._lock.read_locked():
            dimension = max((len(e.vector) for e in self._entries), default=0)
            return {
                'total_entries': len(self._entries),
                'learned_entries': len(self._learned),
                'dimension': dimension
            }
