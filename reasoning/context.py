"""
Context Memory
==============
Short-term interaction memory and keyword pattern weights.

Features:
- Recalls past interactions that share keywords with a new question
- Scores how familiar a set of keywords is from past reinforcement
- Keeps at most `capacity` interactions (oldest dropped first)
- Decays weights of keywords that stop showing up, caps the rest
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple

import structlog


logger = structlog.get_logger(__name__)

# Weights below this are forgotten after decay
MIN_PATTERN_WEIGHT = 1e-6


@dataclass(frozen=True)
class Interaction:
    """A question that was answered, with the keywords it carried"""
    question: str
    answer: str
    keywords: Tuple[str, ...]
    score: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'question': self.question,
            'answer': self.answer,
            'keywords': list(self.keywords),
            'score': self.score,
            'timestamp': self.timestamp.isoformat()
        }


class ContextMemory:
    """
    Interaction log plus the keyword weight table ("patterns").

    The log is scanned in insertion order, so among equally good matches
    the oldest interaction wins.
    """

    def __init__(
        self,
        capacity: int = 1000,
        learning_rate: float = 0.1,
        pattern_decay: float = 0.99,
        max_pattern_weight: Optional[float] = 10.0
    ):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if not 0.0 < pattern_decay <= 1.0:
            raise ValueError(f"pattern_decay must be in (0, 1], got {pattern_decay}")

        self.capacity = capacity
        self.learning_rate = learning_rate
        self.pattern_decay = pattern_decay
        self.max_pattern_weight = max_pattern_weight

        self._interactions: Deque[Interaction] = deque(maxlen=capacity)
        self._patterns: Dict[str, float] = {}
        self._lock = threading.RLock()

    def find_similar_interaction(self, keywords: Sequence[str]) -> Tuple[Optional[Interaction], float]:
        """
        Find the past interaction sharing the most keywords.

        Every (query keyword, past keyword) pair that matches
        case-insensitively counts once, so repeated keywords inflate the
        count. The count is divided by the number of query keywords.
        """
        if not keywords:
            return None, 0.0

        query = [k.lower() for k in keywords]

        best_match: Optional[Interaction] = None
        best_score = 0.0

        with self._lock:
            for interaction in self._interactions:
                past = [k.lower() for k in interaction.keywords]
                match_count = sum(1 for k1 in query for k2 in past if k1 == k2)
                score = match_count / len(query)
                if score > best_score:
                    best_score = score
                    best_match = interaction

        return best_match, best_score

    def evaluate_context(self, keywords: Sequence[str]) -> float:
        """Mean pattern weight of the keywords, 0.0 for no keywords"""
        if not keywords:
            return 0.0

        with self._lock:
            total = sum(self._patterns.get(word, 0.0) for word in keywords)
        return total / len(keywords)

    def learn_from_interaction(
        self,
        question: str,
        answer: str,
        keywords: Sequence[str],
        score: float
    ) -> Interaction:
        """Record an interaction and reinforce its keywords by learning_rate * score"""
        interaction = Interaction(
            question=question,
            answer=answer,
            keywords=tuple(keywords),
            score=score
        )

        with self._lock:
            evicted = len(self._interactions) == self.capacity
            self._interactions.append(interaction)

            self._decay_patterns(exclude=set(keywords))

            for keyword in keywords:
                weight = self._patterns.get(keyword, 0.0) + self.learning_rate * score
                if self.max_pattern_weight is not None:
                    weight = min(weight, self.max_pattern_weight)
                self._patterns[keyword] = weight

        logger.debug(
            "interaction_recorded",
            question=question,
            keywords=list(keywords),
            score=score,
            evicted=evicted
        )
        return interaction

    def _decay_patterns(self, exclude: set) -> None:
        # Caller holds the lock
        if self.pattern_decay >= 1.0:
            return

        forgotten = []
        for keyword, weight in self._patterns.items():
            if keyword in exclude:
                continue
            weight *= self.pattern_decay
            if abs(weight) < MIN_PATTERN_WEIGHT:
                forgotten.append(keyword)
            else:
                self._patterns[keyword] = weight

        for keyword in forgotten:
            del self._patterns[keyword]

    def pattern_weight(self, keyword: str) -> float:
        with self._lock:
            return self._patterns.get(keyword, 0.0)

    @property
    def interactions(self) -> List[Interaction]:
        with self._lock:
            return list(self._interactions)

    @property
    def patterns(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._patterns)

    def __len__(self) -> int:
        with self._lock:
            return len(self._interactions)

    def clear(self) -> None:
        """Forget all interactions and pattern weights"""
        with self._lock:
            self._interactions.clear()
            self._patterns.clear()

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            top = sorted(self._patterns.items(), key=lambda x: -x[1])[:10]
            return {
                'interactions': len(self._interactions),
                'capacity': self.capacity,
                'patterns': len(self._patterns),
                'top_patterns': [{'keyword': k, 'weight': w} for k, w in top]
            }
