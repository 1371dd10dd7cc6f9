"""Interactive editing on top of the scene tree."""

from .session import EditorSession

__all__ = ["EditorSession"]
