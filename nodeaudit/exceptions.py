"""Custom exceptions for nodeaudit."""

from __future__ import annotations

from pathlib import Path


class AuditError(Exception):
    """Base exception for all nodeaudit errors."""


class LockSourceUnavailableError(AuditError):
    """Raised when a lock file is missing or cannot be parsed.

    Recoverable: the loader moves on to the next dependency source.
    """

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"lock file {path} unavailable: {reason}")


class ScanError(AuditError):
    """Raised when the installed package tree cannot be scanned."""


class ManifestError(ScanError):
    """Raised when a package manifest is missing, unreadable or malformed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ModuleNotFoundInTreeError(ScanError):
    """Raised when a package name cannot be resolved from a directory."""

    def __init__(self, name: str, start_dir: Path):
        self.name = name
        self.start_dir = start_dir
        super().__init__(f"cannot find package '{name}' from {start_dir}")


class DependencyCycleError(ScanError):
    """Raised when a manifest is reached again while it is still being resolved."""

    def __init__(self, chain: list[Path]):
        self.chain = chain
        rendered = " -> ".join(str(p) for p in chain)
        super().__init__(f"dependency cycle detected: {rendered}")


class DependencySourcesExhaustedError(AuditError):
    """Raised when neither lock file nor the installed tree yields dependencies."""

    def __init__(self, lock_file_names: tuple[str, ...]):
        self.lock_file_names = lock_file_names
        super().__init__(
            "Failed to get locked dependencies from " + " or ".join(lock_file_names) + "!"
        )
