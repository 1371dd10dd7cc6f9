"""Persisted scene documents and the on-disk document store.

A document is the plain-data shape {id, title, root} exchanged with
storage. Documents are stored as JSON files for human readability and easy
debugging; render markers are omitted from the JSON when a node has none.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .node import Node
from .tree import create_node, validate_tree

logger = logging.getLogger(__name__)


class SceneDocument(BaseModel):
    """A saved scene: identifier, title, and the full node tree."""

    id: str = Field(description="Document identifier")
    title: str = Field(default="Untitled Scene", description="Document title")
    root: Node = Field(description="Root of the scene tree")

    @field_validator("root")
    @classmethod
    def _check_tree(cls, root: Node) -> Node:
        is_valid, errors = validate_tree(root)
        if not is_valid:
            raise ValueError("; ".join(errors))
        return root

    @classmethod
    def new(cls, title: str = "Untitled Scene", root_name: str = "Sample Scene") -> SceneDocument:
        """Create a document holding a single empty root node."""
        return cls(
            id=str(uuid.uuid4())[:8],
            title=title,
            root=create_node(root_name, is_root=True),
        )

    def to_data(self) -> dict:
        """Return the JSON-compatible plain-data form."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_data(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> SceneDocument:
        return cls.model_validate(json.loads(text))


class DocumentStore:
    """Manages scene document files in a directory.

    Handles saving, loading, listing and deleting documents. Each document
    lives in its own JSON file named after its id.
    """

    def __init__(self, documents_dir: Path | str | None = None):
        """Initialize the store.

        Args:
            documents_dir: Directory holding documents.
                           Defaults to ./scenedit_documents/
        """
        if documents_dir is None:
            documents_dir = Path.cwd() / "scenedit_documents"
        self.documents_dir = Path(documents_dir)

    def _ensure_dir(self) -> None:
        self.documents_dir.mkdir(parents=True, exist_ok=True)

    def document_path(self, doc_id: str) -> Path:
        """Get the path for a document file."""
        return self.documents_dir / f"scene_{doc_id}.json"

    def save(self, document: SceneDocument) -> Path:
        """Save document to disk.

        Args:
            document: Document to save

        Returns:
            Path where the document was saved
        """
        self._ensure_dir()
        path = self.document_path(document.id)

        # Write atomically by writing to temp file first
        temp_path = path.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            f.write(document.to_json())
        temp_path.replace(path)

        logger.debug(f"Document saved: {path}")
        return path

    def load(self, doc_id_or_path: str | Path) -> SceneDocument:
        """Load a document from disk.

        Strings are looked up as document ids in this store first; only a
        Path, or a string naming no stored document, is read as a file path.

        Args:
            doc_id_or_path: Either a document id or path to a document file

        Returns:
            Loaded SceneDocument

        Raises:
            FileNotFoundError: If the document doesn't exist
            pydantic.ValidationError: If the document file is invalid
        """
        if isinstance(doc_id_or_path, Path):
            path = doc_id_or_path
        else:
            path = self.document_path(doc_id_or_path)
            if not path.is_file():
                path = Path(doc_id_or_path)

        if not path.is_file():
            raise FileNotFoundError(f"Document not found: {doc_id_or_path}")

        with open(path) as f:
            return SceneDocument.from_json(f.read())

    def create(self, title: str = "Untitled Scene", root_name: str = "Sample Scene") -> SceneDocument:
        """Create and save a new empty document."""
        document = SceneDocument.new(title=title, root_name=root_name)
        self.save(document)
        logger.info(f"Created document {document.id} ({title})")
        return document

    def delete(self, doc_id: str) -> bool:
        """Delete a document file.

        Returns:
            True if deleted, False if not found
        """
        path = self.document_path(doc_id)
        if path.exists():
            path.unlink()
            logger.info(f"Deleted document: {path}")
            return True
        return False

    def list_documents(self) -> list[SceneDocument]:
        """List all readable documents, most recently modified first."""
        if not self.documents_dir.exists():
            return []

        paths = sorted(
            self.documents_dir.glob("scene_*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )

        documents = []
        for path in paths:
            try:
                with open(path) as f:
                    documents.append(SceneDocument.from_json(f.read()))
            except Exception as e:
                logger.warning(f"Failed to load document {path}: {e}")

        return documents
