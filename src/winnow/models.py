from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

KEPT = "kept"
ARCHIVABLE = "archivable"
DOCUMENTATION = "documentation"
OLD_TEST = "old-test"
LEGACY = "legacy"
OTHER_ARCHIVABLE = "other-archivable"

BUCKETS = (KEPT, ARCHIVABLE, DOCUMENTATION, OLD_TEST, LEGACY, OTHER_ARCHIVABLE)


@dataclass(frozen=True)
class ProjectFile:
    path: Path
    rel_path: str
    extension: str

    @property
    def name(self) -> str:
        return self.rel_path.rsplit("/", 1)[-1]

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.rel_path.split("/")[:-1])


@dataclass(frozen=True)
class Decision:
    path: str
    bucket: str  # one of BUCKETS
    reason: str


@dataclass(frozen=True)
class PartitionState:
    """Accumulator threaded through one classification pass."""

    decisions: tuple[Decision, ...] = ()
    kept: frozenset[str] = frozenset()

    def add(self, decision: Decision) -> PartitionState:
        kept = self.kept
        if decision.bucket == KEPT:
            kept = kept | {decision.path}
        return replace(self, decisions=self.decisions + (decision,), kept=kept)


@dataclass(frozen=True)
class CleanupPlan:
    root: str
    generated_at: str
    decisions: tuple[Decision, ...]
    archivable: tuple[str, ...]
    documentation: tuple[str, ...]
    old_tests: tuple[str, ...]
    legacy: tuple[str, ...]
    kept: tuple[str, ...]
    summary: dict[str, Any] = field(default_factory=dict)

    def bucket_of(self, rel_path: str) -> str | None:
        for decision in self.decisions:
            if decision.path == rel_path:
                return decision.bucket
        return None
