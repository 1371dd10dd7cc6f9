"""Core modules for scenedit."""

from .config import EditorConfig
from .history import MAX_HISTORY, History

__all__ = ["EditorConfig", "History", "MAX_HISTORY"]
