from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from winnow.models import ProjectFile

logger = logging.getLogger(__name__)


def collect_files(
    root: Path,
    excluded_dirs: Iterable[str],
    ignored_paths: Iterable[str] = (),
) -> list[ProjectFile]:
    """Return every file under ``root``, skipping excluded directory names.

    Excluded names match a directory's basename at any depth, so a nested
    ``build/`` or ``dist/`` inside source code is skipped as well. A missing
    root yields an empty list.
    """
    root = Path(root)
    if not root.is_dir():
        logger.debug("Root %s does not exist, nothing to enumerate", root)
        return []
    excluded = set(excluded_dirs)
    ignored = tuple(ignored_paths)
    results: list[ProjectFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if name not in excluded]
        for name in filenames:
            full_path = Path(dirpath) / name
            rel_path = full_path.relative_to(root).as_posix()
            if any(fragment in rel_path for fragment in ignored):
                continue
            results.append(
                ProjectFile(
                    path=full_path,
                    rel_path=rel_path,
                    extension=full_path.suffix.lower(),
                )
            )
    results.sort(key=lambda f: f.rel_path)
    logger.debug("Enumerated %d files under %s", len(results), root)
    return results
