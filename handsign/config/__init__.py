"""Configuration management."""
from .settings import Config, load_config, save_config
from .sequences import SequenceCatalog, load_sequences

__all__ = ["Config", "load_config", "save_config", "SequenceCatalog", "load_sequences"]
