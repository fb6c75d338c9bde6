"""
Prompt & Embedding Loading
==========================
Reads the prompt configuration and the word embedding table from disk.

A broken prompt file stops startup. A missing or broken embedding file
only degrades matching: every similarity score becomes 0.
"""

import json
from pathlib import Path
from typing import Dict, List, Tuple, Union

import numpy as np
import structlog
from pydantic import BaseModel, Field, ValidationError

from core.embeddings import EmbeddingTable


logger = structlog.get_logger(__name__)


class ConfigurationError(Exception):
    """The prompt configuration is missing or malformed"""


class KnowledgeItem(BaseModel):
    question: str
    answer: str


class PromptConfig(BaseModel):
    """Shape of prompt.json. Missing sections are empty."""
    greetings: Dict[str, str] = Field(default_factory=dict)
    common_questions: Dict[str, str] = Field(default_factory=dict)
    knowledge_base: List[KnowledgeItem] = Field(default_factory=list)
    default_responses: Dict[str, str] = Field(default_factory=dict)

    def common_question_pairs(self) -> List[Tuple[str, str]]:
        """Common questions as (key, answer) pairs in file order"""
        return list(self.common_questions.items())


def load_prompts(path: Union[str, Path]) -> PromptConfig:
    """Load and validate prompt.json. Raises ConfigurationError."""
    path = Path(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Error loading {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error parsing {path}: {e}") from e

    try:
        config = PromptConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid prompt configuration in {path}: {e}") from e

    logger.info(
        "prompts_loaded",
        path=str(path),
        greetings=len(config.greetings),
        common_questions=len(config.common_questions),
        knowledge_entries=len(config.knowledge_base),
        default_responses=sorted(config.default_responses)
    )
    return config


def load_embeddings(path: Union[str, Path]) -> EmbeddingTable:
    """
    Load {word: [floats]} into numpy vectors.

    Words are lowercased. The first valid vector fixes the dimension;
    vectors of another length or with non-numeric values are skipped.
    """
    path = Path(path)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("embeddings_missing", path=str(path))
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("embeddings_unreadable", path=str(path), error=str(e))
        return {}

    if not isinstance(raw, dict):
        logger.warning("embeddings_unreadable", path=str(path), error="expected a JSON object")
        return {}

    embeddings: EmbeddingTable = {}
    dimension = 0
    skipped = 0

    for word, values in raw.items():
        try:
            vector = np.asarray(values, dtype=np.float64)
        except (TypeError, ValueError):
            skipped += 1
            continue

        if vector.ndim != 1 or len(vector) == 0:
            skipped += 1
            continue
        if dimension == 0:
            dimension = len(vector)
        elif len(vector) != dimension:
            skipped += 1
            continue

        vector.setflags(write=False)
        embeddings[word.lower()] = vector

    if skipped:
        logger.warning("embeddings_skipped", path=str(path), skipped=skipped, dimension=dimension)

    logger.info("embeddings_loaded", path=str(path), words=len(embeddings), dimension=dimension)
    return embeddings
