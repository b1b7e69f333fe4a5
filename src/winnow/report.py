from __future__ import annotations

from collections.abc import Sequence

from winnow.models import CleanupPlan

DEFAULT_PREVIEW = 15
SHORT_PREVIEW = 10


def _section(title: str, note: str, paths: Sequence[str], limit: int | None) -> list[str]:
    lines = [f"{title} ({len(paths)} files):"]
    if not paths:
        lines.append("   (none)")
        lines.append("")
        return lines
    lines.append(f"   {note}")
    shown = paths if limit is None else paths[:limit]
    for path in shown:
        lines.append(f"   - {path}")
    if limit is not None and len(paths) > limit:
        lines.append(f"   ... and {len(paths) - limit} more files")
    lines.append("")
    return lines


def render_console(plan: CleanupPlan, preview: int = DEFAULT_PREVIEW) -> str:
    short = min(preview, SHORT_PREVIEW)
    lines = [
        "📋 CLEANUP ANALYSIS",
        "",
        f"✅ KEPT ({len(plan.kept)} files):",
        "   These files are in use or protected and will be kept.",
        "",
    ]
    lines.extend(
        _section(
            "🗑️  SAFE TO ARCHIVE",
            "These files appear unused and can be archived:",
            plan.archivable,
            preview,
        )
    )
    lines.extend(
        _section(
            "📚 OLD DOCUMENTATION",
            "Documentation outside the protected names:",
            plan.documentation,
            short,
        )
    )
    lines.extend(
        _section(
            "🧪 OLD TEST FILES",
            "Test files without a protected keyword:",
            plan.old_tests,
            short,
        )
    )
    lines.extend(
        _section(
            "🏛️  LEGACY FILES",
            "Files with legacy or backup naming:",
            plan.legacy,
            None,
        )
    )
    return "\n".join(lines)


def print_report(plan: CleanupPlan, preview: int = DEFAULT_PREVIEW) -> None:
    print(render_console(plan, preview))


def render_markdown(plan: CleanupPlan) -> str:
    lines = [
        "# Cleanup Plan",
        "",
        "Files are moved, not deleted. Review the relocation script before running it.",
        "",
        f"Root: `{plan.root}`",
        f"Generated: `{plan.generated_at}`",
        f"Files analyzed: `{plan.summary.get('total_files', len(plan.decisions))}`",
        "",
        "## Summary",
    ]
    for bucket, count in plan.summary.get("by_bucket", {}).items():
        lines.append(f"- {bucket}: {count}")
    lines.append("")
    lines.append("## Reasons")
    for reason, count in plan.summary.get("by_reason", {}).items():
        lines.append(f"- {reason}: {count}")
    for title, paths in (
        ("Safe to archive", plan.archivable),
        ("Old documentation", plan.documentation),
        ("Old tests", plan.old_tests),
        ("Legacy", plan.legacy),
    ):
        lines.append("")
        lines.append(f"## {title}")
        if not paths:
            lines.append("- (none)")
        for path in paths:
            lines.append(f"- {path}")
    lines.append("")
    return "\n".join(lines)
