"""
Response Resolver
=================
Answers a question by walking a fixed list of tiers; the first tier
that produces an answer wins.

Tiers:
1. Context memory   - a past interaction shares most of the keywords
2. Learned entries  - the exact question text was taught at runtime
3. Greetings        - case-insensitive exact match
4. Common questions - a configured key appears inside the question
5. Knowledge base   - semantic similarity over curated entries
6. Fallback         - keyword template, default answer or a generic prompt

Answers from learned entries are written back to context memory, so
asking a learned question again reinforces its keywords.
"""

import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from config.prompts import PromptConfig, load_embeddings, load_prompts
from config.settings import MatchingConfig, Settings
from core.embeddings import EmbeddingTable, embedding_dimension
from storage.knowledge_base import KnowledgeBase
from .analyzer import InputAnalyzer, NLTKTagger, Tagger, TaggerError
from .context import ContextMemory


logger = structlog.get_logger(__name__)

Chooser = Callable[[Sequence[str]], str]


class ResolutionTier(Enum):
    """Where an answer came from"""
    MEMORY = "memory"
    LEARNED = "learned"
    GREETING = "greeting"
    COMMON_QUESTION = "common_question"
    KNOWLEDGE_BASE = "knowledge_base"
    KEYWORDS = "keywords"
    DEFAULT = "default"
    GENERIC = "generic"
    ERROR = "error"


@dataclass
class Resolution:
    """Result of resolving a question"""
    answer: str
    tier: ResolutionTier
    score: float = 0.0
    keywords: List[str] = field(default_factory=list)
    concepts: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'answer': self.answer,
            'tier': self.tier.value,
            'score': self.score,
            'keywords': self.keywords,
            'concepts': self.concepts
        }


class ResponseResolver:
    """
    Layered question answering over memory, knowledge base and canned tables.

    One instance is shared by all requests. A whole resolution runs under
    the resolver's lock so that memory reads and pattern updates from
    concurrent requests never interleave. Learning only takes the knowledge
    base's own lock.
    """

    KEYWORDS_RESPONSE = "Let's explore %s in detail. What specific aspects interest you?"
    ERROR_RESPONSE = "Sorry, I couldn't understand that question. Could you rephrase it?"
    GENERIC_PROMPTS = (
        "I'm here to help. Could you specify what you'd like to learn about?",
        "I can assist you with various topics. What interests you most?",
        "Let me help you! What would you like to explore?",
    )

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        embeddings: EmbeddingTable,
        prompts: PromptConfig,
        memory: ContextMemory,
        analyzer: InputAnalyzer,
        matching: Optional[MatchingConfig] = None,
        chooser: Optional[Chooser] = None
    ):
        self.kb = knowledge_base
        self.embeddings = embeddings
        self.memory = memory
        self.analyzer = analyzer
        self.matching = matching or MatchingConfig()
        self.choose = chooser or random.choice

        self.greetings: Dict[str, str] = _lowercase_keys(prompts.greetings.items(), "greetings")
        self.common_questions: Tuple[Tuple[str, str], ...] = tuple(
            _lowercase_keys(prompts.common_question_pairs(), "common_questions").items()
        )
        self.default_responses: Dict[str, str] = dict(prompts.default_responses)

        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def resolve(self, question: str) -> str:
        """Answer a question. Never raises."""
        try:
            return self.resolve_detailed(question).answer
        except Exception:
            logger.exception("resolution_failed", question=question)
            return self.default_responses.get("error", self.ERROR_RESPONSE)

    def resolve_detailed(self, question: str) -> Resolution:
        """Answer a question and report which tier produced the answer"""
        with self._lock:
            resolution = self._resolve(question)

        logger.debug(
            "resolution",
            question=question,
            tier=resolution.tier.value,
            score=round(resolution.score, 4),
            keywords=resolution.keywords
        )
        return resolution

    def learn(self, question: str, answer: str) -> bool:
        """Teach an answer for the exact question text"""
        self.kb.learn(question, answer)
        return True

    def adapt_response(self, base: str, keywords: Sequence[str]) -> str:
        """Prefix the answer with the keywords it was matched on"""
        if keywords:
            return f"Based on {', '.join(keywords)}, I understand that {base}"
        return base

    def get_stats(self) -> Dict[str, Any]:
        return {
            'knowledge_base': self.kb.get_stats(),
            'memory': self.memory.get_stats(),
            'embeddings': {
                'words': len(self.embeddings),
                'dimension': embedding_dimension(self.embeddings)
            },
            'greetings': len(self.greetings),
            'common_questions': len(self.common_questions)
        }

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def _resolve(self, question: str) -> Resolution:
        keywords, concepts = self._analyze(question)
        context_score = self.memory.evaluate_context(keywords)

        def result(answer: str, tier: ResolutionTier, score: float = 0.0) -> Resolution:
            return Resolution(answer, tier, score, list(keywords), list(concepts))

        # Context memory
        interaction, score = self.memory.find_similar_interaction(keywords)
        if interaction is not None and score > self.matching.memory_threshold:
            return result(self.adapt_response(interaction.answer, keywords), ResolutionTier.MEMORY, score)

        # Learned entries
        learned = self.kb.get_learned(question)
        if learned is not None:
            adapted = self.adapt_response(learned, keywords)
            self.memory.learn_from_interaction(question, adapted, keywords, context_score)
            return result(adapted, ResolutionTier.LEARNED, context_score)

        question_lower = question.lower()

        # Greetings
        greeting = self.greetings.get(question_lower)
        if greeting is not None:
            return result(greeting, ResolutionTier.GREETING, 1.0)

        # Common questions, first configured key wins
        for key, answer in self.common_questions:
            if key in question_lower:
                return result(answer, ResolutionTier.COMMON_QUESTION, 1.0)

        # Knowledge base
        answer, score = self.kb.find_best_match(question, self.embeddings)
        if score > self.matching.knowledge_threshold:
            return result(answer, ResolutionTier.KNOWLEDGE_BASE, score)

        return self._fallback(question)

    def _fallback(self, question: str) -> Resolution:
        try:
            keywords, concepts = self.analyzer.analyze(question)
        except TaggerError as e:
            logger.warning("tagger_failed", question=question, error=str(e), stage="fallback")
            return Resolution(
                self.default_responses.get("error", self.ERROR_RESPONSE),
                ResolutionTier.ERROR
            )

        if keywords:
            terms = ", ".join(keywords[:self.matching.max_fallback_keywords])
            template = self.default_responses.get("keywords")
            if template is not None:
                answer = self._format_template(template, terms)
            else:
                answer = self.KEYWORDS_RESPONSE % terms
            return Resolution(answer, ResolutionTier.KEYWORDS, 0.0, keywords, concepts)

        default = self.default_responses.get("default")
        if default is not None:
            return Resolution(default, ResolutionTier.DEFAULT, 0.0, keywords, concepts)

        return Resolution(self.choose(self.GENERIC_PROMPTS), ResolutionTier.GENERIC, 0.0, keywords, concepts)

    def _analyze(self, question: str) -> Tuple[List[str], List[str]]:
        try:
            return self.analyzer.analyze(question)
        except TaggerError as e:
            logger.warning("tagger_failed", question=question, error=str(e), stage="analysis")
            return [], []

    @staticmethod
    def _format_template(template: str, terms: str) -> str:
        """Fill a printf-style %s template; templates without a slot are used as-is"""
        try:
            return template % terms
        except (TypeError, ValueError):
            logger.warning("keywords_template_invalid", template=template)
            return template


def _lowercase_keys(pairs: Iterable[Tuple[str, str]], section: str) -> Dict[str, str]:
    """Lowercase keys in order; the first key wins when two differ only by case"""
    lowered: Dict[str, str] = {}
    for key, answer in pairs:
        folded = key.lower()
        if folded in lowered:
            logger.warning("duplicate_prompt_key", section=section, key=key, kept=lowered[folded])
            continue
        lowered[folded] = answer
    return lowered


def create_resolver(
    settings: Settings,
    tagger: Optional[Tagger] = None,
    chooser: Optional[Chooser] = None
) -> ResponseResolver:
    """
    Build a resolver from the files named in settings.

    Raises ConfigurationError if the prompt file cannot be loaded.
    """
    prompts = load_prompts(settings.prompts_path)
    embeddings = load_embeddings(settings.embeddings_path)

    kb = KnowledgeBase()
    for item in prompts.knowledge_base:
        kb.add_entry(item.question, item.answer, embeddings)

    memory = ContextMemory(
        capacity=settings.memory.capacity,
        learning_rate=settings.memory.learning_rate,
        pattern_decay=settings.memory.pattern_decay,
        max_pattern_weight=settings.memory.max_pattern_weight
    )
    if tagger is None:
        tagger = NLTKTagger(auto_download=settings.NLTK_AUTO_DOWNLOAD)
        tagger.ensure_resources()
    analyzer = InputAnalyzer(tagger)

    logger.info(
        "resolver_ready",
        knowledge_entries=len(kb),
        vocabulary=len(embeddings),
        dimension=embedding_dimension(embeddings)
    )
    return ResponseResolver(
        knowledge_base=kb,
        embeddings=embeddings,
        prompts=prompts,
        memory=memory,
        analyzer=analyzer,
        matching=settings.matching,
        chooser=chooser
    )
