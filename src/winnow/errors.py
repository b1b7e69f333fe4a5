from __future__ import annotations


class WinnowError(Exception):
    """Base class for errors the command line reports without a traceback."""


class ConfigError(WinnowError):
    pass


class ScanError(WinnowError):
    def __init__(self, rel_path: str, cause: Exception) -> None:
        super().__init__(f"Cannot read {rel_path}: {cause}")
        self.rel_path = rel_path
        self.cause = cause
