"""
Input Analyzer
==============
Splits a question into keywords (nouns) and concepts (verbs) using a
part-of-speech tagger.

The tagger is a black box with one method, tag(text), returning
(token, tag) pairs. NLTK's Penn Treebank tagger is the default; any
object with the same method can be plugged in.
"""

import threading
from typing import Dict, List, Protocol, Sequence, Tuple

import nltk
import structlog


logger = structlog.get_logger(__name__)

KEYWORD_TAGS = {'NN', 'NNS', 'NNP', 'NNPS', 'NOUN', 'PROPN'}
CONCEPT_TAGS = {'VERB'}

# Download name -> path under nltk.data
NLTK_RESOURCES: Dict[str, str] = {
    'punkt_tab': 'tokenizers/punkt_tab',
    'averaged_perceptron_tagger_eng': 'taggers/averaged_perceptron_tagger_eng',
}


class TaggerError(Exception):
    """The part-of-speech tagger could not process the text"""


class Tagger(Protocol):
    def tag(self, text: str) -> Sequence[Tuple[str, str]]:
        ...


class NLTKTagger:
    """Penn Treebank tagging via nltk.word_tokenize + nltk.pos_tag"""

    def __init__(self, auto_download: bool = False):
        self.auto_download = auto_download
        self._download_attempted = False
        self._lock = threading.Lock()

    def tag(self, text: str) -> List[Tuple[str, str]]:
        try:
            return self._tag(text)
        except LookupError:
            if not self._download_resources():
                raise
            return self._tag(text)

    def ensure_resources(self) -> List[str]:
        """
        Check the NLTK data once, downloading it if allowed.

        Returns the names still missing; a warning is logged for them.
        """
        missing = self._missing_resources()
        if missing and self._download_resources():
            missing = self._missing_resources()

        if missing:
            logger.warning(
                "nltk_resources_missing",
                resources=missing,
                hint="run nltk.download() for these or set ASKBASE_NLTK_DOWNLOAD=true"
            )
        return missing

    @staticmethod
    def _missing_resources() -> List[str]:
        missing = []
        for name, path in NLTK_RESOURCES.items():
            try:
                nltk.data.find(path)
            except LookupError:
                missing.append(name)
        return missing

    def _tag(self, text: str) -> List[Tuple[str, str]]:
        tokens = nltk.word_tokenize(text)
        return nltk.pos_tag(tokens)

    def _download_resources(self) -> bool:
        """Fetch missing NLTK data once; False if not allowed or already tried"""
        with self._lock:
            if not self.auto_download or self._download_attempted:
                return False
            self._download_attempted = True

            for resource in NLTK_RESOURCES:
                logger.info("nltk_resource_download", resource=resource)
                nltk.download(resource, quiet=True)
            return True


class InputAnalyzer:
    """Extracts keywords and concepts from free text"""

    def __init__(self, tagger: Tagger):
        self.tagger = tagger

    def analyze(self, text: str) -> Tuple[List[str], List[str]]:
        """
        Tag the text and sort tokens into keywords and concepts.

        Raises TaggerError if the tagger fails for any reason.
        """
        try:
            tagged = self.tagger.tag(text)
        except Exception as e:
            raise TaggerError(f"Could not tag input: {e}") from e

        keywords: List[str] = []
        concepts: List[str] = []
        for token, tag in tagged:
            if tag in KEYWORD_TAGS:
                keywords.append(token)
            elif tag in CONCEPT_TAGS or tag.startswith('VB'):
                concepts.append(token)

        return keywords, concepts
