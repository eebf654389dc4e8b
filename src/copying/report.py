"""Console rendering of a copy Report."""

from typing import List

from versioning.models import Report


def format_report(report: Report) -> str:
    """Render the copied, missing and modified sections.

    Empty sections are omitted; every section is followed by a blank line.
    """
    lines: List[str] = []
    if report.copied:
        lines.append("Copied artifacts:")
        lines.extend(report.copied)
        lines.append("")
    if report.missing:
        lines.append("Missing artifacts:")
        lines.extend(str(c) for c in report.missing)
        lines.append("")
    if report.modifications:
        lines.append("Modified artifacts:")
        lines.extend(f"{original} --> {new}" for original, new in report.modifications)
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def report_to_dict(report: Report) -> dict:
    """JSON-serializable form of ``report``."""
    return {
        "copied": list(report.copied),
        "missing": [str(c) for c in report.missing],
        "modified": [{"from": original, "to": new} for original, new in report.modifications],
    }
