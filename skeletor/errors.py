"""Error taxonomy for Skeletor.

Anything that makes the rest of the input uninterpretable is raised as a
``SkeletorError`` subclass and halts the operation. Failures confined to a
single filesystem entry are never raised; they are recorded as
``skeletor.models.results.Failure`` entries on the run result.
"""

from __future__ import annotations

from pathlib import Path


class SkeletorError(Exception):
    """Base class for every fatal Skeletor error."""

    default_tip = ""

    def __init__(self, message: str, tip: str | None = None):
        super().__init__(message)
        self.message = message
        self.tip = self.default_tip if tip is None else tip

    def __str__(self) -> str:
        if self.tip:
            return f"{self.message}\ntip: {self.tip}"
        return self.message


class ConfigError(SkeletorError):
    """Malformed or missing declarative input."""

    default_tip = "Ensure the file is valid YAML with a 'directories' mapping at the top level"

    @classmethod
    def missing_key(cls, key: str) -> ConfigError:
        return cls(
            f"missing configuration key: '{key}'",
            tip=f"Ensure your YAML file contains the required '{key}' section",
        )

    @classmethod
    def invalid_yaml(cls, detail: str) -> ConfigError:
        return cls(
            f"invalid YAML configuration: {detail}",
            tip="Validate the YAML syntax (indentation, quoting, colons)",
        )


class ValidationError(SkeletorError):
    """Illegal entry name or a path that would escape its parent."""

    default_tip = "Entry names must be single path components without '/', '\\' or '..'"


class PatternError(SkeletorError):
    """An ignore pattern supplied directly on the invocation failed to compile."""

    default_tip = "Check glob pattern syntax (e.g. '*.log', 'target/', '!keep.txt')"

    def __init__(self, pattern: str, reason: str, tip: str | None = None):
        super().__init__(f"invalid ignore pattern: '{pattern}' ({reason})", tip=tip)
        self.pattern = pattern
        self.reason = reason


class FilesystemError(SkeletorError):
    """I/O failure at an operation boundary (target root, source root, input file)."""

    def __init__(self, message: str, path: str | Path, tip: str | None = None):
        super().__init__(message, tip=tip)
        self.path = Path(path)

    @classmethod
    def from_os_error(cls, error: OSError, path: str | Path) -> FilesystemError:
        """Translate an ``OSError`` into a user-facing error with a tip."""
        if isinstance(error, FileNotFoundError):
            if "." in Path(path).name:
                return cls.file_not_found(path)
            return cls.directory_not_found(path)
        if isinstance(error, PermissionError):
            return cls(
                f"permission denied: '{path}'",
                path,
                tip="Check file/directory permissions or run with appropriate privileges",
            )
        if isinstance(error, NotADirectoryError):
            return cls.not_a_directory(path)
        return cls(f"I/O error on '{path}': {error.strerror or error}", path)

    @classmethod
    def file_not_found(cls, path: str | Path) -> FilesystemError:
        return cls(
            f"file not found: '{path}'",
            path,
            tip="Check that the file exists and you have read permissions",
        )

    @classmethod
    def directory_not_found(cls, path: str | Path) -> FilesystemError:
        return cls(
            f"directory not found: '{path}'",
            path,
            tip="Verify the directory path exists and is accessible",
        )

    @classmethod
    def not_a_directory(cls, path: str | Path) -> FilesystemError:
        return cls(
            f"not a directory: '{path}'",
            path,
            tip="Point the command at a directory, not a file",
        )
