"""Aggregate statistics over parsed kdig records."""

from collections import Counter
from typing import List, Sequence

from .models import KdigStats, QueryTimeSummary, ResponseSizeSummary, SummaryReport


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence; the mean of the two middle values for even counts."""
    ordered = sorted(values)
    count = len(ordered)
    middle = count // 2
    if count % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return ordered[middle]


def summarize_query_times(records: Sequence[KdigStats]) -> QueryTimeSummary:
    # summed in sorted order so the mean does not depend on record order
    query_times: List[float] = sorted(r.query_time_ms for r in records)
    return QueryTimeSummary(
        min=query_times[0],
        max=query_times[-1],
        mean=sum(query_times) / len(query_times),
        median=median(query_times),
    )


def summarize_response_sizes(records: Sequence[KdigStats]) -> ResponseSizeSummary:
    sizes: List[int] = [r.response_size_bytes for r in records]
    total = sum(sizes)
    return ResponseSizeSummary(
        min=min(sizes),
        max=max(sizes),
        mean=total / len(sizes),
        total=total,
    )


def compute_summary(records: Sequence[KdigStats]) -> SummaryReport:
    """Compute the summary report for a non-empty collection of records.

    Every scalar statistic is independent of record order. Server counts are
    keyed by "server:port"; protocol labels are counted verbatim.
    """
    if not records:
        raise ValueError("compute_summary requires at least one record")

    server_counts = Counter(r.server_key for r in records)
    protocol_counts = Counter(r.protocol for r in records)

    return SummaryReport(
        total_records=len(records),
        query_time=summarize_query_times(records),
        response_size=summarize_response_sizes(records),
        server_counts=dict(server_counts),
        protocol_counts=dict(protocol_counts),
    )
