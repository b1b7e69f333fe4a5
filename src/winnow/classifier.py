from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone
from functools import reduce
from pathlib import Path

from winnow.config import ClassifierConfig
from winnow.enumerator import collect_files
from winnow.models import (
    ARCHIVABLE,
    BUCKETS,
    DOCUMENTATION,
    KEPT,
    LEGACY,
    OLD_TEST,
    OTHER_ARCHIVABLE,
    CleanupPlan,
    Decision,
    PartitionState,
    ProjectFile,
)
from winnow.scanner import ReferenceScanner, build_scanner

logger = logging.getLogger(__name__)


def classify(
    files: Iterable[ProjectFile],
    config: ClassifierConfig,
    scanner: ReferenceScanner,
    root: Path | str = ".",
) -> CleanupPlan:
    files = list(files)
    initial = PartitionState()
    state = reduce(
        lambda acc, info: acc.add(decide(info, acc, config, scanner)),
        files,
        initial,
    )
    return build_plan(state, root)


def decide(
    info: ProjectFile,
    state: PartitionState,
    config: ClassifierConfig,
    scanner: ReferenceScanner,
) -> Decision:
    """Apply the rule chain to one file; the first matching rule wins."""
    rel_path = info.rel_path
    name = info.name

    if rel_path in config.always_keep or rel_path in state.kept:
        return Decision(rel_path, KEPT, "allowlist")

    if any(keyword in rel_path for keyword in config.protected_keywords):
        return Decision(rel_path, KEPT, "protected_keyword")

    if info.extension == ".md" and not any(doc in name for doc in config.protected_doc_names):
        return Decision(rel_path, DOCUMENTATION, "documentation")

    if _search_any(config.test_name_patterns, name) and not any(
        keyword in name for keyword in config.protected_test_keywords
    ):
        return Decision(rel_path, OLD_TEST, "test_naming")

    if _search_any(config.legacy_name_patterns, name) or _search_any(
        config.legacy_path_patterns, rel_path
    ):
        return Decision(rel_path, LEGACY, "legacy_naming")

    if info.extension in config.source_extensions and any(
        rel_path.startswith(prefix) for prefix in config.source_roots
    ):
        if scanner.is_referenced(info):
            return Decision(rel_path, KEPT, "referenced")
        return Decision(rel_path, ARCHIVABLE, "unreferenced")

    if info.extension in config.disposable_extensions or _search_any(
        config.disposable_patterns, rel_path
    ):
        return Decision(rel_path, OTHER_ARCHIVABLE, "disposable")
    return Decision(rel_path, KEPT, "default_keep")


def _search_any(patterns: Iterable[str], text: str) -> bool:
    return any(re.search(pattern, text) for pattern in patterns)


def build_plan(state: PartitionState, root: Path | str) -> CleanupPlan:
    by_bucket: dict[str, list[str]] = {bucket: [] for bucket in BUCKETS}
    by_reason: dict[str, int] = {}
    for decision in state.decisions:
        by_bucket[decision.bucket].append(decision.path)
        by_reason[decision.reason] = by_reason.get(decision.reason, 0) + 1

    # Disposable non-code files are archived alongside unreferenced code.
    archivable = [
        d.path for d in state.decisions if d.bucket in (ARCHIVABLE, OTHER_ARCHIVABLE)
    ]
    summary = {
        "total_files": len(state.decisions),
        "by_bucket": {bucket: len(paths) for bucket, paths in by_bucket.items()},
        "by_reason": dict(sorted(by_reason.items())),
    }
    logger.info(
        "Classified %d files: %d kept, %d to archive",
        len(state.decisions),
        len(by_bucket[KEPT]),
        len(state.decisions) - len(by_bucket[KEPT]),
    )
    return CleanupPlan(
        root=str(root),
        generated_at=datetime.now(timezone.utc).isoformat(),
        decisions=state.decisions,
        archivable=tuple(archivable),
        documentation=tuple(by_bucket[DOCUMENTATION]),
        old_tests=tuple(by_bucket[OLD_TEST]),
        legacy=tuple(by_bucket[LEGACY]),
        kept=tuple(by_bucket[KEPT]),
        summary=summary,
    )


def analyze(
    root: Path,
    config: ClassifierConfig,
    scanner_kind: str = "heuristic",
) -> CleanupPlan:
    """Enumerate ``root``, scan references once and classify every file."""
    root = Path(root)
    # The archive tree is never re-classified on a later run.
    excluded = set(config.excluded_dirs) | {config.archive_dir}
    files = collect_files(root, excluded, config.ignored_paths)
    scanner = build_scanner(
        scanner_kind,
        files,
        source_extensions=config.source_extensions,
        on_read_error=config.on_read_error,
    )
    return classify(files, config, scanner, root=root)
