"""
askbase Reasoning Module
"""

from .analyzer import (
    InputAnalyzer,
    NLTKTagger,
    Tagger,
    TaggerError
)

from .context import (
    ContextMemory,
    Interaction
)

from .engine import (
    ResponseResolver,
    Resolution,
    ResolutionTier,
    create_resolver
)

__all__ = [
    'InputAnalyzer', 'NLTKTagger', 'Tagger', 'TaggerError',
    'ContextMemory', 'Interaction',
    'ResponseResolver', 'Resolution', 'ResolutionTier', 'create_resolver'
]
