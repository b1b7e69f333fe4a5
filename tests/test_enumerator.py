from __future__ import annotations

from pathlib import Path

from winnow.config import DEFAULT_EXCLUDED_DIRS
from winnow.enumerator import collect_files


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_collects_relative_forward_slash_paths(tmp_path: Path) -> None:
    _write(tmp_path / "app" / "page.tsx", "export default 1")
    _write(tmp_path / "lib" / "util" / "dates.ts", "")
    _write(tmp_path / "README.md", "readme")

    files = collect_files(tmp_path, DEFAULT_EXCLUDED_DIRS)

    assert [f.rel_path for f in files] == ["README.md", "app/page.tsx", "lib/util/dates.ts"]
    dates = files[-1]
    assert dates.extension == ".ts"
    assert dates.name == "dates.ts"
    assert dates.parts == ("lib", "util")


def test_excluded_dirs_are_pruned_at_any_depth(tmp_path: Path) -> None:
    _write(tmp_path / "node_modules" / "react" / "index.js", "")
    _write(tmp_path / ".git" / "HEAD", "ref")
    _write(tmp_path / "lib" / "build" / "output.js", "")
    _write(tmp_path / "lib" / "keep.ts", "")

    files = collect_files(tmp_path, DEFAULT_EXCLUDED_DIRS)

    assert [f.rel_path for f in files] == ["lib/keep.ts"]


def test_ignored_path_fragments(tmp_path: Path) -> None:
    _write(tmp_path / ".kiro" / "settings" / "mcp.json", "{}")
    _write(tmp_path / ".kiro" / "specs" / "plan.md", "plan")

    files = collect_files(tmp_path, DEFAULT_EXCLUDED_DIRS, ignored_paths=[".kiro/settings"])

    assert [f.rel_path for f in files] == [".kiro/specs/plan.md"]


def test_missing_root_yields_empty_list(tmp_path: Path) -> None:
    assert collect_files(tmp_path / "does-not-exist", DEFAULT_EXCLUDED_DIRS) == []


def test_enumeration_is_repeatable(tmp_path: Path) -> None:
    _write(tmp_path / "a.ts", "")
    _write(tmp_path / "components" / "B.tsx", "")
    _write(tmp_path / "docs" / "c.md", "")

    first = {f.rel_path for f in collect_files(tmp_path, DEFAULT_EXCLUDED_DIRS)}
    second = {f.rel_path for f in collect_files(tmp_path, DEFAULT_EXCLUDED_DIRS)}

    assert first == second
    assert len(first) == 3
