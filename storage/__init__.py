from .knowledge_base import KnowledgeBase, KnowledgeEntry
from .locks import ReadWriteLock

__all__ = [
    "KnowledgeBase",
    "KnowledgeEntry",
    "ReadWriteLock"
]
