"""Reference scanners: decide whether any project file refers to a candidate.

Two implementations share the :class:`ReferenceScanner` interface. The
heuristic scanner looks for literal import spellings; the graph scanner
extracts module specifiers and resolves them to files. Both read every
source file once, up front.
"""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from winnow.config import DEFAULT_SOURCE_EXTENSIONS, READ_ERROR_POLICIES
from winnow.errors import ScanError
from winnow.models import ProjectFile

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "@/"
SCANNER_KINDS = ("heuristic", "graph")
VERIFY_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".json", ".md")

IMPORT_FROM_RE = re.compile(
    r"""\b(?:import|export)\s+(?:type\s+)?[^'"`;]*?\bfrom\s*['"]([^'"\n]+)['"]"""
)
SIDE_EFFECT_IMPORT_RE = re.compile(r"""(?m)^\s*import\s*['"]([^'"\n]+)['"]""")
CALL_IMPORT_RE = re.compile(r"""\b(?:import|require)\s*\(\s*['"]([^'"\n]+)['"]\s*\)""")


class ReferenceScanner(Protocol):
    def is_referenced(self, candidate: ProjectFile) -> bool: ...


def _load_sources(
    files: Iterable[ProjectFile],
    extensions: Iterable[str],
    on_read_error: str,
) -> tuple[dict[str, str], list[str]]:
    if on_read_error not in READ_ERROR_POLICIES:
        raise ValueError(f"Unknown read error policy: {on_read_error}")
    extensions = tuple(extensions)
    contents: dict[str, str] = {}
    unreadable: list[str] = []
    for info in files:
        if info.extension not in extensions:
            continue
        try:
            contents[info.rel_path] = info.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            if on_read_error == "raise":
                raise ScanError(info.rel_path, exc) from exc
            logger.warning("Could not read %s: %s", info.rel_path, exc)
            unreadable.append(info.rel_path)
    return contents, unreadable


def module_path(rel_path: str, extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS) -> str:
    for ext in sorted(extensions, key=len, reverse=True):
        if rel_path.endswith(ext):
            return rel_path[: -len(ext)]
    return rel_path


def reference_patterns(module: str) -> list[str]:
    patterns = []
    for target in (module, ALIAS_PREFIX + module):
        for quote in ("'", '"'):
            patterns.append(f"from {quote}{target}{quote}")
            patterns.append(f"import({quote}{target}{quote})")
            patterns.append(f"require({quote}{target}{quote})")
    return patterns


class HeuristicReferenceScanner:
    """Literal substring search for import spellings of a candidate.

    Known blind spots: ``./foo`` pointing at ``./foo/index.ts``, re-exports,
    relative specifiers written from another directory, and computed paths.
    """

    def __init__(
        self,
        files: Iterable[ProjectFile],
        source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        on_read_error: str = "ignore",
    ) -> None:
        self.source_extensions = tuple(source_extensions)
        self.on_read_error = on_read_error
        self.contents, self.unreadable = _load_sources(
            files, self.source_extensions, on_read_error
        )

    def is_referenced(self, candidate: ProjectFile) -> bool:
        if self.unreadable and self.on_read_error == "keep":
            return True
        patterns = reference_patterns(module_path(candidate.rel_path, self.source_extensions))
        for rel_path, content in self.contents.items():
            if rel_path == candidate.rel_path:
                continue
            if any(pattern in content for pattern in patterns):
                logger.debug("%s referenced from %s", candidate.rel_path, rel_path)
                return True
        return False


class ImportGraphScanner:
    """Resolves import specifiers to project files and keeps the reverse index."""

    def __init__(
        self,
        files: Iterable[ProjectFile],
        source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        on_read_error: str = "ignore",
    ) -> None:
        files = list(files)
        self.source_extensions = tuple(source_extensions)
        self.on_read_error = on_read_error
        self.known = {info.rel_path for info in files}
        contents, self.unreadable = _load_sources(files, self.source_extensions, on_read_error)
        self.importers: dict[str, set[str]] = {}
        for importer, content in contents.items():
            for spec in extract_specifiers(content):
                target = self.resolve(importer, spec)
                if target is not None and target != importer:
                    self.importers.setdefault(target, set()).add(importer)

    def is_referenced(self, candidate: ProjectFile) -> bool:
        if self.unreadable and self.on_read_error == "keep":
            return True
        return bool(self.importers.get(candidate.rel_path))

    def resolve(self, importer: str, spec: str) -> str | None:
        spec = spec.split("?", 1)[0]
        if spec.startswith("./") or spec.startswith("../"):
            base = posixpath.normpath(posixpath.join(posixpath.dirname(importer), spec))
        elif spec.startswith(ALIAS_PREFIX):
            base = posixpath.normpath(spec[len(ALIAS_PREFIX):])
        elif spec.startswith("/"):
            return None
        else:
            # Bare specifiers only count when they name a project path (baseUrl imports).
            base = posixpath.normpath(spec)
        if base.startswith("../") or base == "..":
            return None
        for option in self._candidates(base):
            if option in self.known:
                return option
        return None

    def _candidates(self, base: str) -> list[str]:
        options = [base]
        options.extend(base + ext for ext in self.source_extensions)
        options.extend(f"{base}/index{ext}" for ext in self.source_extensions)
        return options


def extract_specifiers(content: str) -> set[str]:
    specs: set[str] = set()
    specs.update(IMPORT_FROM_RE.findall(content))
    specs.update(SIDE_EFFECT_IMPORT_RE.findall(content))
    specs.update(CALL_IMPORT_RE.findall(content))
    return specs


def build_scanner(
    kind: str,
    files: Iterable[ProjectFile],
    source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
    on_read_error: str = "ignore",
) -> ReferenceScanner:
    if kind == "heuristic":
        return HeuristicReferenceScanner(files, source_extensions, on_read_error)
    if kind == "graph":
        return ImportGraphScanner(files, source_extensions, on_read_error)
    raise ValueError(f"Unknown scanner kind: {kind}")


def find_references(
    files: Iterable[ProjectFile],
    targets: Iterable[str],
    on_read_error: str = "ignore",
) -> dict[str, list[str]]:
    """Map each target path to the files that mention it by path, name or stem."""
    contents, _ = _load_sources(files, VERIFY_EXTENSIONS, on_read_error)
    results: dict[str, list[str]] = {}
    for target in targets:
        target = target.replace("\\", "/")
        name = posixpath.basename(target)
        stem = Path(name).stem
        terms = {term for term in (target, name, stem) if term}
        results[target] = sorted(
            rel_path
            for rel_path, content in contents.items()
            if rel_path != target and any(term in content for term in terms)
        )
    return results
