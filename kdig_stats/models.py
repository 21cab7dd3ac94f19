"""Data models for kdig statistics."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class KdigStats:
    """Metrics extracted from a single kdig output file."""
    query_time_ms: float
    response_size_bytes: int
    server: str
    port: int
    protocol: str

    @property
    def server_key(self) -> str:
        return f"{self.server}:{self.port}"


@dataclass
class QueryTimeSummary:
    """Query time statistics in milliseconds."""
    min: float
    max: float
    mean: float
    median: float


@dataclass
class ResponseSizeSummary:
    """Response size statistics in bytes."""
    min: int
    max: int
    mean: float
    total: int


def sorted_counts(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    """Order a key -> count mapping by descending count, then by key."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


@dataclass
class SummaryReport:
    """Aggregate statistics computed over all parsed files."""
    total_records: int
    query_time: QueryTimeSummary
    response_size: ResponseSizeSummary
    server_counts: Dict[str, int] = field(default_factory=dict)  # "server:port" -> count
    protocol_counts: Dict[str, int] = field(default_factory=dict)

    def servers_by_count(self) -> List[Tuple[str, int]]:
        return sorted_counts(self.server_counts)

    def protocols_by_count(self) -> List[Tuple[str, int]]:
        return sorted_counts(self.protocol_counts)


@dataclass
class CollectionResult:
    """Outcome of parsing a list of candidate files."""
    records: List[KdigStats] = field(default_factory=list)
    parsed_count: int = 0
    skipped_count: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)  # (path, message)
