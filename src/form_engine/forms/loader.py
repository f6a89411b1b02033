"""Form Loader for loading form definitions from YAML or JSON files."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from form_engine.forms.base import FormDefinition
from form_engine.forms.registry import FormRegistry

logger = logging.getLogger(__name__)

FORM_FILE_PATTERNS = ("*.yaml", "*.yml", "*.json")


class FormLoader:
    """Loads form definitions from files into a registry.

    A file holds either a single definition (``id``, ``name``, ``schema``)
    or a mapping with a ``forms`` list of them.
    """

    def __init__(self, registry: FormRegistry | None = None):
        from form_engine.forms.registry import get_global_registry

        self.registry = registry if registry is not None else get_global_registry()

    def load_file(self, path: Path | str) -> list[FormDefinition]:
        """Load form definitions from a single YAML or JSON file.

        Args:
            path: Path to the file

        Returns:
            List of loaded definitions
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Form file not found: {path}")

        with open(path) as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        forms = self._parse_forms(data, source=path)
        logger.debug("Loaded %d form(s) from %s", len(forms), path)
        return forms

    def load_from_string(self, content: str) -> list[FormDefinition]:
        """Load form definitions from a YAML (or JSON) string."""
        return self._parse_forms(yaml.safe_load(content))

    def load_directory(self, directory: Path | str) -> list[FormDefinition]:
        """Load all form files from a directory, in file name order.

        Args:
            directory: Path to the directory

        Returns:
            List of all loaded definitions
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files: list[Path] = []
        for pattern in FORM_FILE_PATTERNS:
            files.extend(directory.glob(pattern))

        forms = []
        for file_path in sorted(files):
            forms.extend(self.load_file(file_path))
        return forms

    def _parse_forms(
        self,
        data: dict[str, Any] | list[dict[str, Any]] | None,
        source: Path | None = None,
    ) -> list[FormDefinition]:
        """Parse definitions from a loaded document and register them."""
        if data is None:
            return []

        if isinstance(data, dict):
            items = data["forms"] if "forms" in data else [data]
        else:
            items = data

        forms = []
        for item in items:
            definition = self._parse_single_form(item, source)
            self.registry.register(definition)
            forms.append(definition)
        return forms

    def _parse_single_form(
        self,
        data: dict[str, Any],
        source: Path | None = None,
    ) -> FormDefinition:
        """Parse a single form definition from a dictionary."""
        if "id" not in data or "schema" not in data:
            where = f" in {source}" if source else ""
            raise ValueError(f"Form definition{where} needs both 'id' and 'schema'")

        metadata = dict(data.get("metadata", {}))
        if source is not None:
            metadata.setdefault("source_file", str(source))

        return FormDefinition(
            id=data["id"],
            name=data.get("name", data["id"]),
            schema=data["schema"],
            description=data.get("description", ""),
            metadata=metadata,
        )


def load_forms(path: Path | str, registry: FormRegistry | None = None) -> list[FormDefinition]:
    """Convenience function to load forms from a file or directory.

    Args:
        path: Path to a form file or directory
        registry: Optional registry (uses global if not provided)

    Returns:
        List of loaded definitions
    """
    loader = FormLoader(registry)
    path = Path(path)

    if path.is_dir():
        return loader.load_directory(path)
    return loader.load_file(path)
