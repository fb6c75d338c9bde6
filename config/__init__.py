from .settings import Settings, MatchingConfig, MemoryConfig, StorageConfig, LoggingConfig
from .prompts import ConfigurationError, KnowledgeItem, PromptConfig, load_prompts, load_embeddings
from .observability import setup_logging

__all__ = [
    "Settings",
    "MatchingConfig",
    "MemoryConfig",
    "StorageConfig",
    "LoggingConfig",
    "ConfigurationError",
    "KnowledgeItem",
    "PromptConfig",
    "load_prompts",
    "load_embeddings",
    "setup_logging"
]
