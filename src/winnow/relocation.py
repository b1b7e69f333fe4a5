"""Relocation script generation and archive restore.

The generated script is the only artifact that touches the tree: it is
written for a human to review and run later, and it only moves files.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from winnow import __version__
from winnow.models import CleanupPlan

logger = logging.getLogger(__name__)

UNUSED_DIR = "unused"
DOCUMENTATION_DIR = "documentation"
OLD_TESTS_DIR = "old-tests"
LEGACY_DIR = "legacy"
CATEGORY_DIRS = (UNUSED_DIR, DOCUMENTATION_DIR, OLD_TESTS_DIR, LEGACY_DIR)
ARCHIVE_INDEX = "README.md"

_TEMPLATE = '''#!/usr/bin/env python3
"""Generated by winnow __VERSION__ at __GENERATED__.

Moves the files listed below into __ARCHIVE_NAME__/<category>/, keeping their
relative paths. Review the lists before running. Files are moved, not
deleted; restore them with `winnow --restore`.
"""

import shutil
import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = (Path(__file__).resolve().parent / __ROOT_HOP__).resolve()
ARCHIVE_DIR = ROOT / __ARCHIVE__

SAFE_TO_ARCHIVE = [
__SAFE_TO_ARCHIVE__]

OLD_DOCUMENTATION = [
__OLD_DOCUMENTATION__]

OLD_TESTS = [
__OLD_TESTS__]

LEGACY_FILES = [
__LEGACY_FILES__]

CATEGORIES = [
    ("__UNUSED_DIR__", "Moving safe-to-archive files", SAFE_TO_ARCHIVE),
    ("__DOCUMENTATION_DIR__", "Moving old documentation", OLD_DOCUMENTATION),
    ("__OLD_TESTS_DIR__", "Moving old test files", OLD_TESTS),
    ("__LEGACY_DIR__", "Moving legacy files", LEGACY_FILES),
]


def move_file(rel_path, category):
    src = ROOT / rel_path
    dest = ARCHIVE_DIR / category / rel_path
    if not src.exists():
        print(f"⏭️ Not found: {rel_path}")
        return "missing"
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dest))
    except OSError as exc:
        print(f"❌ Failed to move {rel_path}: {exc}")
        return "failed"
    print(f"✅ Moved: {rel_path} -> {category}/{rel_path}")
    return "moved"


def write_index(counts, moved):
    lines = [
        "# Archived Files Index",
        "",
        "Files moved during project cleanup on "
        + datetime.now(timezone.utc).isoformat() + ".",
        "",
        "## Archive Statistics",
        f"- Total files moved: {counts['moved']}",
        f"- Files not found: {counts['missing']}",
        f"- Files that failed to move: {counts['failed']}",
        "",
        "## Categories",
    ]
    for category, title, _ in CATEGORIES:
        lines.append("")
        lines.append(f"### {category}/")
        files = moved.get(category, [])
        if not files:
            lines.append("- (none)")
        for rel_path in files:
            lines.append(f"- {rel_path}")
    lines.extend(
        [
            "",
            "## Restoration",
            "",
            "Each file sits under its category folder at its original relative path.",
            "Move it back by hand, or run `winnow --restore` from the project root.",
            "",
        ]
    )
    ARCHIVE_DIR.mkdir(parents=True, exist_ok=True)
    (ARCHIVE_DIR / "__ARCHIVE_INDEX__").write_text("\\n".join(lines), encoding="utf-8")


def main():
    print(f"🧹 Moving files into {ARCHIVE_DIR}")
    counts = {"moved": 0, "missing": 0, "failed": 0}
    moved = {}
    for category, title, files in CATEGORIES:
        print(f"\\n📁 {title}...")
        for rel_path in files:
            outcome = move_file(rel_path, category)
            counts[outcome] += 1
            if outcome == "moved":
                moved.setdefault(category, []).append(rel_path)
    write_index(counts, moved)
    print(
        f"\\n✨ Cleanup complete! Moved {counts['moved']} files, "
        f"{counts['missing']} not found, {counts['failed']} failed."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
'''


def _render_list(paths: Sequence[str]) -> str:
    return "".join(f"    {path!r},\n" for path in paths)


def render_relocation_script(
    plan: CleanupPlan,
    root: Path,
    archive_dir: str,
    script_path: Path,
) -> str:
    root_hop = Path(os.path.relpath(Path(root).resolve(), Path(script_path).resolve().parent))
    replacements = {
        "__VERSION__": __version__,
        "__GENERATED__": plan.generated_at,
        "__ROOT_HOP__": repr(root_hop.as_posix()),
        "__ARCHIVE_NAME__": archive_dir,
        "__ARCHIVE_INDEX__": ARCHIVE_INDEX,
        "__ARCHIVE__": repr(archive_dir),
        "__UNUSED_DIR__": UNUSED_DIR,
        "__DOCUMENTATION_DIR__": DOCUMENTATION_DIR,
        "__OLD_TESTS_DIR__": OLD_TESTS_DIR,
        "__LEGACY_DIR__": LEGACY_DIR,
        # Path lists go in last so file names are never rewritten.
        "__SAFE_TO_ARCHIVE__": _render_list(plan.archivable),
        "__OLD_DOCUMENTATION__": _render_list(plan.documentation),
        "__OLD_TESTS__": _render_list(plan.old_tests),
        "__LEGACY_FILES__": _render_list(plan.legacy),
    }
    source = _TEMPLATE
    for marker, value in replacements.items():
        source = source.replace(marker, value)
    return source


def write_relocation_script(
    plan: CleanupPlan,
    root: Path,
    archive_dir: str,
    script_path: Path,
) -> Path:
    """Write the relocation script, replacing any earlier one at the same path."""
    script_path = Path(script_path)
    script_path.parent.mkdir(parents=True, exist_ok=True)
    script_path.write_text(
        render_relocation_script(plan, root, archive_dir, script_path),
        encoding="utf-8",
    )
    script_path.chmod(0o755)
    logger.info("Wrote relocation script %s", script_path)
    return script_path


@dataclass
class RestoreResult:
    restored: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)


def restore_archive(root: Path, archive_dir: str) -> RestoreResult:
    """Move archived files back to their original paths under ``root``.

    Files whose original path is occupied again stay in the archive and are
    reported as conflicts.
    """
    root = Path(root)
    archive_root = root / archive_dir
    result = RestoreResult()
    for category in CATEGORY_DIRS:
        category_root = archive_root / category
        if not category_root.is_dir():
            continue
        for dirpath, _, filenames in os.walk(category_root):
            for name in sorted(filenames):
                src = Path(dirpath) / name
                rel_path = src.relative_to(category_root).as_posix()
                dest = root / rel_path
                if dest.exists():
                    logger.warning("Not restoring %s: destination exists", rel_path)
                    result.conflicts.append(rel_path)
                    continue
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(src), str(dest))
                result.restored.append(rel_path)
        _prune_empty_dirs(category_root)
    return result


def _prune_empty_dirs(top: Path) -> None:
    for dirpath, _, _ in os.walk(top, topdown=False):
        path = Path(dirpath)
        if not any(path.iterdir()):
            path.rmdir()
