"""Exception hierarchy for the ExpressOS scaffolder.

Every error the CLI knows how to report derives from ``ExpressOSError``.
Anything else reaching the top level is treated as unexpected.
"""

from __future__ import annotations

from pathlib import Path


class ExpressOSError(Exception):
    """Base class for all scaffolder errors."""

    exit_code: int = 1


class InvalidInputError(ExpressOSError):
    """Raised for a bad project name, component name, or component type."""


class RegistryFormatError(InvalidInputError):
    """Raised when the services registry file cannot be parsed."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Cannot update services registry{where}: {reason}")


class AlreadyExistsError(ExpressOSError):
    """Raised when the target project directory is already present."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Directory "{path.name}" already exists')


class NotAProjectError(ExpressOSError):
    """Raised when a generator runs outside a scaffolded project."""

    def __init__(self, cwd: Path, missing: list[str]) -> None:
        self.cwd = cwd
        self.missing = missing
        super().__init__(
            "This command must be run from within an ExpressOS project directory "
            f"(missing: {', '.join(missing)})"
        )


class FilesystemError(ExpressOSError):
    """Raised when a filesystem operation fails.

    ``kind`` is one of ``"not_found"``, ``"permission_denied"`` or ``"io"``.
    """

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO = "io"

    def __init__(self, kind: str, path: Path, message: str) -> None:
        self.kind = kind
        self.path = path
        super().__init__(message)

    @classmethod
    def from_os_error(cls, exc: OSError, path: Path) -> "FilesystemError":
        """Classify an ``OSError`` raised while touching *path*."""
        if isinstance(exc, FileNotFoundError):
            return cls(cls.NOT_FOUND, path, f"No such file or directory: {path}")
        if isinstance(exc, PermissionError):
            return cls(cls.PERMISSION_DENIED, path, f"Permission denied: {path}")
        return cls(cls.IO, path, f"I/O error on {path}: {exc.strerror or exc}")
