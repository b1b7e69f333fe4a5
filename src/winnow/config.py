"""Classifier configuration.

A run loads one :class:`ClassifierConfig` up front and never mutates it.
Application-specific lists (the allowlist, protected keywords) belong in a
YAML file passed with ``--config``; the defaults below only carry
conventions that hold for any Next.js style tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from winnow.errors import ConfigError

READ_ERROR_POLICIES = ("ignore", "keep", "raise")

DEFAULT_EXCLUDED_DIRS = frozenset({"node_modules", ".next", ".git", "dist", "build"})
DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
DEFAULT_SOURCE_ROOTS = ("app/", "components/", "lib/")
DEFAULT_ALWAYS_KEEP = frozenset(
    {
        "package.json",
        "next.config.js",
        "tailwind.config.js",
        "tsconfig.json",
        ".gitignore",
        "vercel.json",
        "README.md",
        ".env.example",
    }
)


@dataclass(frozen=True)
class ClassifierConfig:
    always_keep: frozenset[str] = DEFAULT_ALWAYS_KEEP
    protected_keywords: tuple[str, ...] = ()
    protected_doc_names: tuple[str, ...] = ("README", "DEPLOYMENT", "SECURITY", "PRODUCTION")
    protected_test_keywords: tuple[str, ...] = ()
    test_name_patterns: tuple[str, ...] = (r"^test-", r"\.test\.", r"\.spec\.")
    legacy_name_patterns: tuple[str, ...] = (r"Legacy", r"Old", r"Backup", r"\.backup")
    legacy_path_patterns: tuple[str, ...] = (r"unused", r"archive", r"backup")
    source_roots: tuple[str, ...] = DEFAULT_SOURCE_ROOTS
    source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    disposable_patterns: tuple[str, ...] = (r"archived-files/", r"temp[^/]*$", r"tmp[^/]*$")
    disposable_extensions: tuple[str, ...] = (".log", ".bak")
    excluded_dirs: frozenset[str] = DEFAULT_EXCLUDED_DIRS
    ignored_paths: tuple[str, ...] = ()
    archive_dir: str = "archive-safe"
    script_path: str = "scripts/production-safe-cleanup.py"
    on_read_error: str = "ignore"

    def __post_init__(self) -> None:
        if self.on_read_error not in READ_ERROR_POLICIES:
            raise ConfigError(
                f"on_read_error must be one of {', '.join(READ_ERROR_POLICIES)}, "
                f"got {self.on_read_error!r}"
            )
        for name in (
            "test_name_patterns",
            "legacy_name_patterns",
            "legacy_path_patterns",
            "disposable_patterns",
        ):
            for pattern in getattr(self, name):
                try:
                    re.compile(pattern)
                except re.error as exc:
                    raise ConfigError(f"{name}: invalid pattern {pattern!r}: {exc}") from exc

    def with_overrides(self, **overrides: Any) -> ClassifierConfig:
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


_SET_FIELDS = {"always_keep", "excluded_dirs"}
_STR_FIELDS = {"archive_dir", "script_path", "on_read_error"}


def load_config(path: Path | None = None) -> ClassifierConfig:
    """Build a config from a YAML file layered over the defaults.

    ``always_keep`` may be a flat list or a mapping of named lists, so the
    allowlist can stay grouped (pages, api, components, ...) in the file.
    """
    if path is None:
        return ClassifierConfig()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping at the top level")
    return config_from_mapping(data, source=str(path))


def config_from_mapping(data: dict[str, Any], source: str = "<config>") -> ClassifierConfig:
    known = {f.name for f in fields(ClassifierConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, raw in data.items():
        if key in _STR_FIELDS:
            if not isinstance(raw, str):
                raise ConfigError(f"{source}: {key} must be a string")
            values[key] = raw
            continue
        items = _flatten_strings(key, raw, source)
        if key in _SET_FIELDS:
            values[key] = frozenset(_normalize_path(item) for item in items)
        else:
            values[key] = tuple(items)
    return ClassifierConfig(**values)


def _flatten_strings(key: str, raw: Any, source: str) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        merged: list[str] = []
        for group in raw.values():
            merged.extend(_flatten_strings(key, group, source))
        return merged
    if isinstance(raw, (list, tuple)):
        if not all(isinstance(item, str) for item in raw):
            raise ConfigError(f"{source}: {key} must contain only strings")
        return list(raw)
    raise ConfigError(f"{source}: {key} must be a list of strings")


def _normalize_path(value: str) -> str:
    value = value.replace("\\", "/")
    while value.startswith("./"):
        value = value[2:]
    return value
