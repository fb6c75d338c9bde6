"""
Root pytest configuration.

Puts the project root on sys.path and provides a stub tagger plus small
prompt/embedding fixtures so no NLTK data is needed.
"""

import json
import re
import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import MatchingConfig, PromptConfig
from reasoning import ContextMemory, InputAnalyzer, ResponseResolver
from storage import KnowledgeBase


class StubTagger:
    """Tags tokens from a fixed lookup table, everything else as DT"""

    def __init__(self, tags=None, fail=False):
        self.tags = {k.lower(): v for k, v in (tags or {}).items()}
        self.fail = fail
        self.calls = 0

    def tag(self, text):
        self.calls += 1
        if self.fail:
            raise RuntimeError("tagger unavailable")
        tokens = re.findall(r"\w+|[^\w\s]", text)
        return [(token, self.tags.get(token.lower(), 'DT')) for token in tokens]

    def ensure_resources(self):
        return []


DEFAULT_TAGS = {
    'go': 'NNP',
    'goroutine': 'NN',
    'goroutines': 'NNS',
    'channel': 'NN',
    'buffer': 'NN',
    'memory': 'NN',
    'pointer': 'NN',
    'generics': 'NNS',
    'compiler': 'NN',
    'use': 'VB',
    'run': 'VBP',
    'explain': 'VB',
}


@pytest.fixture
def tagger():
    return StubTagger(DEFAULT_TAGS)


@pytest.fixture
def embeddings():
    return {
        'what': np.array([1.0, 0.0, 0.0, 0.0]),
        'is': np.array([0.0, 1.0, 0.0, 0.0]),
        'a': np.array([0.0, 0.0, 1.0, 0.0]),
        'goroutine?': np.array([0.0, 0.0, 0.0, 1.0]),
        'map': np.array([0.5, 0.5, 0.0, 0.0]),
    }


@pytest.fixture
def prompts():
    return PromptConfig(
        greetings={'hi': 'Hello!', 'Good Morning': 'Morning!'},
        common_questions={'channel': 'Channels synchronize goroutines.'},
        knowledge_base=[{'question': 'What is a goroutine?', 'answer': 'A lightweight thread.'}],
        default_responses={}
    )


@pytest.fixture
def make_resolver(embeddings, tagger):
    """Factory building a resolver around the given prompts"""

    def factory(prompts, tagger=tagger, embeddings=embeddings, chooser=None, memory=None, matching=None):
        kb = KnowledgeBase()
        for item in prompts.knowledge_base:
            kb.add_entry(item.question, item.answer, embeddings)
        return ResponseResolver(
            knowledge_base=kb,
            embeddings=embeddings,
            prompts=prompts,
            memory=memory or ContextMemory(pattern_decay=1.0, max_pattern_weight=None),
            analyzer=InputAnalyzer(tagger),
            matching=matching or MatchingConfig(),
            chooser=chooser
        )

    return factory


@pytest.fixture
def resolver(make_resolver, prompts):
    return make_resolver(prompts)


@pytest.fixture
def data_dir(tmp_path):
    """Directory with a valid prompt.json and embeddings.json"""
    (tmp_path / "prompt.json").write_text(json.dumps({
        "greetings": {"hi": "Hello!"},
        "common_questions": {"channel": "Channels synchronize goroutines."},
        "knowledge_base": [
            {"question": "What is a goroutine?", "answer": "A lightweight thread."}
        ],
        "default_responses": {"default": "Ask me about Go."}
    }))
    (tmp_path / "embeddings.json").write_text(json.dumps({
        "what": [1.0, 0.0, 0.0, 0.0],
        "is": [0.0, 1.0, 0.0, 0.0],
        "a": [0.0, 0.0, 1.0, 0.0],
        "goroutine?": [0.0, 0.0, 0.0, 1.0]
    }))
    return tmp_path
