"""
On-disk project store for documents and templates.

Documents and templates are JSON files discovered under the project root.
The guid -> path index is the project database: it is built by scanning
document files, so a guid stays valid when a file is moved or renamed.
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..exceptions import DocumentLoadError, DocumentNotFoundError
from ..models import Document, Template
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class ProjectStore:
    """
    Discovers, loads and saves documents and templates under a project root.

    Parsing failures during discovery are collected rather than raised so a
    single broken file does not hide the rest of the project.
    """

    def __init__(self, root: str | Path, document_glob: str = "*.level.json", template_glob: str = "*.template.json"):
        """
        Initialize the project store.

        Args:
            root: Project root directory
            document_glob: Glob pattern for document files
            template_glob: Glob pattern for template files
        """
        self.root = Path(root)
        self.document_glob = document_glob
        self.template_glob = template_glob
        self._guid_index: dict[str, Path] | None = None
        self.parsing_errors: list[tuple[str, str]] = []

    def discover_document_paths(self) -> list[Path]:
        """Recursively scan the project root for document files."""
        if not self.root.exists():
            raise FileNotFoundError(f"Project root does not exist: {self.root}")
        return sorted(p for p in self.root.rglob(self.document_glob) if p.is_file())

    def discover_template_paths(self) -> list[Path]:
        """Recursively scan the project root for template files."""
        if not self.root.exists():
            raise FileNotFoundError(f"Project root does not exist: {self.root}")
        return sorted(p for p in self.root.rglob(self.template_glob) if p.is_file())

    def refresh(self) -> dict[str, Path]:
        """
        Rebuild the guid -> path index from disk.

        Returns:
            Mapping of document guid to file path
        """
        index: dict[str, Path] = {}
        self.parsing_errors.clear()

        for path in self.discover_document_paths():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except UnicodeDecodeError as e:
                self.parsing_errors.append((str(path), f"Not valid UTF-8: {e}"))
                continue
            except (OSError, json.JSONDecodeError) as e:
                self.parsing_errors.append((str(path), f"Invalid JSON: {e}"))
                continue

            guid = data.get("guid") if isinstance(data, dict) else None
            if not isinstance(guid, str) or not guid.strip():
                self.parsing_errors.append((str(path), "Missing document guid"))
                continue
            if guid in index:
                self.parsing_errors.append((str(path), f"Guid '{guid}' already used by {index[guid]}"))
                continue
            index[guid] = path

        self._guid_index = index
        logger.debug(
            "Project index rebuilt", root=str(self.root), documents=len(index), parsing_errors=len(self.parsing_errors)
        )
        return index

    @property
    def guid_index(self) -> dict[str, Path]:
        if self._guid_index is None:
            self.refresh()
        assert self._guid_index is not None
        return self._guid_index

    def document_guids(self) -> list[str]:
        return sorted(self.guid_index)

    def resolve_path(self, guid: str) -> Path | None:
        """Path of the document with the given guid, or None."""
        if not guid or not guid.strip():
            return None
        return self.guid_index.get(guid)

    def guid_for_path(self, path: str | Path) -> str | None:
        """Guid of the document stored at path, or None."""
        target = Path(path).resolve()
        for guid, candidate in self.guid_index.items():
            if candidate.resolve() == target:
                return guid
        return None

    def _read_json(self, path: Path) -> dict:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise DocumentLoadError(f"File not found: {path}", path=str(path)) from e
        except UnicodeDecodeError as e:
            raise DocumentLoadError(f"{path} is not valid UTF-8: {e}", path=str(path)) from e
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentLoadError(f"Invalid JSON in {path}: {e}", path=str(path)) from e

        if not isinstance(data, dict):
            raise DocumentLoadError(f"{path} must contain a JSON object", path=str(path))
        return data

    def load_document(self, path: str | Path) -> Document:
        """
        Load a document from disk.

        Raises:
            DocumentLoadError: The file is missing, not JSON, or fails model validation
        """
        path = Path(path)
        data = self._read_json(path)
        try:
            document = Document.model_validate(data)
        except ValidationError as e:
            raise DocumentLoadError(f"Invalid document {path}: {e}", path=str(path)) from e
        document.path = path
        return document

    def load_template(self, path: str | Path) -> Template:
        """
        Load a template from disk.

        Raises:
            DocumentLoadError: The file is missing, not JSON, or fails model validation
        """
        path = Path(path)
        data = self._read_json(path)
        try:
            template = Template.model_validate(data)
        except ValidationError as e:
            raise DocumentLoadError(f"Invalid template {path}: {e}", path=str(path)) from e
        template.path = path
        return template

    def _write_json(self, path: Path, data: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def save_document(self, document: Document, path: str | Path | None = None) -> Path:
        """
        Write a document to disk and record it in the guid index.

        Args:
            document: Document to save
            path: Destination (defaults to the document's own path)

        Returns:
            Path the document was written to
        """
        target = Path(path) if path is not None else document.path
        if target is None:
            raise DocumentNotFoundError(f"Document {document.guid} has no path to save to", guid=document.guid)

        self._write_json(target, document.to_json_dict())
        document.path = target
        document.dirty = False
        self.guid_index[document.guid] = target
        logger.debug("Document saved", document_guid=document.guid, path=str(target))
        return target

    def save_template(self, template: Template, path: str | Path | None = None) -> Path:
        """Write a template to disk. Door ids must already be cleared by the caller."""
        target = Path(path) if path is not None else template.path
        if target is None:
            raise DocumentNotFoundError(f"Template {template.name} has no path to save to")

        self._write_json(target, template.to_json_dict())
        template.path = target
        logger.debug("Template saved", path=str(target))
        return target
