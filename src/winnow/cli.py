from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from winnow import __version__
from winnow.config import ClassifierConfig, load_config
from winnow.errors import WinnowError

LOG_FORMAT = "%(asctime)s - %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("winnow")


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="winnow",
        description=(
            "Classify project files as kept or archivable and generate a "
            "reviewable relocation script. Nothing is moved until that script is run."
        ),
    )
    parser.add_argument("--path", default=".", help="Project root to analyze")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument(
        "--scanner",
        choices=["heuristic", "graph"],
        default="heuristic",
        help="Reference scanner: literal import spellings or resolved import graph",
    )
    parser.add_argument(
        "--on-read-error",
        choices=["ignore", "keep", "raise"],
        default=None,
        help="What an unreadable source file means for reference scanning",
    )
    parser.add_argument(
        "--script",
        default=None,
        help="Relocation script path, relative to --path",
    )
    parser.add_argument("--archive-dir", default=None, help="Archive directory name")
    parser.add_argument("--report", default=None, help="Also write a Markdown report here")
    parser.add_argument(
        "--preview",
        type=int,
        default=15,
        help="Files listed per category in the console report",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--restore",
        action="store_true",
        help="Move archived files back to their original locations",
    )
    mode.add_argument(
        "--verify",
        nargs="+",
        metavar="FILE",
        help="Report which project files mention the given files",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    root = Path(args.path).resolve()

    try:
        return _run(args, root)
    except WinnowError as exc:
        raise SystemExit(str(exc)) from exc


def _run(args: argparse.Namespace, root: Path) -> int:
    from winnow.classifier import analyze
    from winnow.relocation import restore_archive, write_relocation_script
    from winnow.report import print_report, render_markdown

    config = load_config(Path(args.config) if args.config else None).with_overrides(
        on_read_error=args.on_read_error,
        archive_dir=args.archive_dir,
        script_path=args.script,
    )
    if not root.is_dir():
        logger.warning("Path does not exist or is not a directory: %s", root)

    if args.restore:
        result = restore_archive(root, config.archive_dir)
        for rel_path in result.restored:
            print(f"✅ Restored: {rel_path}")
        for rel_path in result.conflicts:
            print(f"⚠️  Kept in archive (destination exists): {rel_path}")
        print(f"\n🔄 Restored {len(result.restored)} files from {config.archive_dir}/")
        return 0

    if args.verify:
        return _verify(root, config, args.verify)

    print(f"🧹 Analyzing {root}\n")
    plan = analyze(root, config, scanner_kind=args.scanner)
    print_report(plan, preview=args.preview)

    if root.is_dir():
        script_path = write_relocation_script(
            plan, root, config.archive_dir, root / config.script_path
        )
        print(f"📝 Generated relocation script: {script_path}")
    if args.report:
        report_path = Path(args.report)
        if not report_path.is_absolute():
            report_path = root / report_path
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(render_markdown(plan), encoding="utf-8")
        print(f"📝 Wrote report: {report_path}")

    print("\nNext steps:")
    print("1. Review the lists in the relocation script")
    print(f"2. Run: python {config.script_path}")
    print("3. Build and test the application")
    print("4. If anything broke, run: winnow --restore")
    return 0


def _verify(root: Path, config: ClassifierConfig, targets: list[str]) -> int:
    from winnow.enumerator import collect_files
    from winnow.scanner import find_references

    files = collect_files(root, config.excluded_dirs, config.ignored_paths)
    results = find_references(files, targets, on_read_error=config.on_read_error)
    safe = [target for target, refs in results.items() if not refs]
    for target, refs in results.items():
        if not refs:
            continue
        print(f"⚠️  {target}:")
        for ref in refs:
            print(f"   Referenced in: {ref}")
        print()
    print(f"✅ SAFE TO MOVE ({len(safe)} files):")
    for target in safe:
        print(f"   {target}")
    print(f"\n📊 {len(results) - len(safe)} of {len(results)} files have references")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
