"""
Configuration Settings
======================
Centralized configuration for all askbase components.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os


ENV_PREFIX = "ASKBASE_"


@dataclass
class MatchingConfig:
    """Answer resolution thresholds"""
    memory_threshold: float = 0.8     # Recall a past interaction above this
    knowledge_threshold: float = 0.7  # Accept a curated answer above this
    max_fallback_keywords: int = 3    # Keywords named in the fallback answer


@dataclass
class MemoryConfig:
    """Interaction memory and pattern learning"""
    capacity: int = 1000
    learning_rate: float = 0.1
    pattern_decay: float = 0.99  # 1.0 disables decay
    max_pattern_weight: Optional[float] = 10.0


@dataclass
class StorageConfig:
    """Input files, relative to DATA_DIR"""
    prompts_file: str = "prompt.json"
    embeddings_file: str = "embeddings.json"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "console"  # "console" or "json"


@dataclass
class Settings:
    """Main application settings"""
    # Paths
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).parent.parent)
    DATA_DIR: Path = field(default_factory=lambda: Path(__file__).parent.parent / "data")

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEBUG: bool = False

    # Tagger
    NLTK_AUTO_DOWNLOAD: bool = True

    # Sub-configs
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Defaults overridden by ASKBASE_* environment variables"""
        settings = cls()

        data_dir = os.getenv(ENV_PREFIX + "DATA_DIR")
        if data_dir:
            settings.DATA_DIR = Path(data_dir)

        settings.HOST = os.getenv(ENV_PREFIX + "HOST", settings.HOST)
        settings.PORT = int(os.getenv(ENV_PREFIX + "PORT", settings.PORT))
        settings.DEBUG = _env_flag(ENV_PREFIX + "DEBUG", settings.DEBUG)
        settings.NLTK_AUTO_DOWNLOAD = _env_flag(ENV_PREFIX + "NLTK_DOWNLOAD", settings.NLTK_AUTO_DOWNLOAD)

        settings.logging.level = os.getenv(ENV_PREFIX + "LOG_LEVEL", settings.logging.level)
        settings.logging.format = os.getenv(ENV_PREFIX + "LOG_FORMAT", settings.logging.format)
        return settings

    @property
    def prompts_path(self) -> Path:
        return self.DATA_DIR / self.storage.prompts_file

    @property
    def embeddings_path(self) -> Path:
        return self.DATA_DIR / self.storage.embeddings_file


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
