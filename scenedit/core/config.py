"""Configuration management for scenedit.

This module defines all configuration models using Pydantic for validation.
Configuration can be loaded from JSON files or constructed programmatically.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from .history import MAX_HISTORY


class HistoryParams(BaseModel):
    """Undo/redo parameters."""

    max_depth: int = Field(
        default=MAX_HISTORY,
        ge=1,
        le=10000,
        description="Maximum number of undoable edits kept"
    )


class StorageParams(BaseModel):
    """Where and when documents are written."""

    documents_dir: Path = Field(
        default=Path("scenedit_documents"),
        description="Directory holding scene documents"
    )
    save_on_exit: bool = Field(
        default=True,
        description="Save the open document when the editor shell exits"
    )


class DefaultsParams(BaseModel):
    """Names given to newly created things."""

    root_name: str = Field(default="Sample Scene", description="Name of a new document's root")
    new_node_name: str = Field(default="New Node", description="Name of a newly added node")
    document_title: str = Field(default="Untitled Scene", description="Title of a new document")


class RenderParams(BaseModel):
    """Tessellation of the unit primitives used for export."""

    radial_sections: int = Field(
        default=24,
        ge=3,
        le=256,
        description="Segments around cylinders and cones"
    )
    sphere_subdivisions: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Icosphere subdivision level"
    )


class EditorConfig(BaseModel):
    """Main configuration container."""

    history: HistoryParams = Field(default_factory=HistoryParams)
    storage: StorageParams = Field(default_factory=StorageParams)
    defaults: DefaultsParams = Field(default_factory=DefaultsParams)
    render: RenderParams = Field(default_factory=RenderParams)

    @classmethod
    def from_file(cls, path: Path | str) -> EditorConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        return cls.model_validate(data)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def default(cls) -> EditorConfig:
        """Create a default configuration."""
        return cls()
