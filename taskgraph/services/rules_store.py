"""Plain-text storage for dependency rule files.

Rule files are stored as UTF-8 text inside a single directory. Names are
restricted to one path component so callers cannot escape that directory.
"""

from __future__ import annotations

import re
from pathlib import Path

from taskgraph.core.config import settings
from taskgraph.core.exceptions import AppError
from taskgraph.core.logging import get_logger

logger = get_logger(__name__)

RULES_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")


class RulesStoreError(AppError):
    """Base exception for rule file storage errors."""


class RulesFileNotFoundError(RulesStoreError):
    """Raised when a named rule file does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"File not found: {name}",
            error_code="RULES_FILE_NOT_FOUND",
            details={"name": name},
        )
        self.name = name


class InvalidRulesNameError(RulesStoreError):
    """Raised when a rule file name is not a single safe path component."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Invalid rules file name: {name!r}",
            error_code="INVALID_RULES_NAME",
            details={"name": name},
        )
        self.name = name


class RulesStore:
    """Load and save raw rule text by name.

    Example:
        >>> store = RulesStore("rules")
        >>> path = store.save("build", "Fetch -> Compile")
        >>> store.load("build")
        'Fetch -> Compile'
    """

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self.base_dir = Path(base_dir if base_dir is not None else settings.RULES_DIR)

    def path_for(self, name: str) -> Path:
        """Resolve ``name`` to a file inside ``base_dir``.

        Raises:
            InvalidRulesNameError: If the name is not a single safe component.
        """
        if not RULES_NAME_PATTERN.fullmatch(name):
            raise InvalidRulesNameError(name)
        return self.base_dir / name

    def save(self, name: str, content: str) -> Path:
        """Write ``content`` to the named file, replacing any previous text."""
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps line endings byte-for-byte on every platform
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.info(
            "Rules file saved",
            extra={"context": {"name": name, "chars": len(content)}},
        )
        return path

    def load(self, name: str) -> str:
        """Read the named file.

        Raises:
            RulesFileNotFoundError: If no such file exists.
        """
        path = self.path_for(name)
        if not path.is_file():
            raise RulesFileNotFoundError(name)
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_names(self) -> list[str]:
        """Names of stored rule files, sorted."""
        if not self.base_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.base_dir.iterdir()
            if entry.is_file() and RULES_NAME_PATTERN.fullmatch(entry.name)
        )


__all__ = [
    "InvalidRulesNameError",
    "RulesFileNotFoundError",
    "RulesStore",
    "RulesStoreError",
]
