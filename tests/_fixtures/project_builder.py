"""Helper utilities for constructing temporary Java projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping

from apidoc.java.index import SourceTypeResolver


class ProjectBuilder:
    """Utility for writing sources into a throwaway project and indexing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def resolver(self, exclude_paths: Iterable[str] = ()) -> SourceTypeResolver:
        """Return a fresh index of the project's Java sources."""
        return SourceTypeResolver.from_directory(self.root, exclude_paths)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["ProjectBuilder"]
