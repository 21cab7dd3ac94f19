"""Console rendering of a kdig summary report."""

import sys
from typing import List, Optional, TextIO

from .models import SummaryReport


def format_summary(report: SummaryReport) -> str:
    """Render the report as the multi-section text summary."""
    qt = report.query_time
    rs = report.response_size
    lines: List[str] = [
        "=== Kdig Analysis Summary ===",
        "",
        f"Total files analyzed: {report.total_records}",
        "",
        "Query Time Statistics (ms):",
        f"  Min:     {qt.min:.2f}",
        f"  Max:     {qt.max:.2f}",
        f"  Average: {qt.mean:.2f}",
        f"  Median:  {qt.median:.2f}",
        "",
        "Response Size Statistics (bytes):",
        f"  Min:     {rs.min}",
        f"  Max:     {rs.max}",
        f"  Average: {rs.mean:.2f}",
        f"  Total:   {rs.total}",
        "",
        "Unique Servers Queried:",
    ]
    for server, count in report.servers_by_count():
        lines.append(f"  {server} - {count} queries")
    lines.append("")

    lines.append("Protocol Distribution:")
    for protocol, count in report.protocols_by_count():
        lines.append(f"  {protocol}: {count}")
    lines.append("")

    return "\n".join(lines)


def print_summary(report: SummaryReport, file: Optional[TextIO] = None) -> None:
    out = file or sys.stdout
    print(file=out)
    print(format_summary(report), file=out)
