"""Export kdig summary statistics as Prometheus metrics."""

from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, generate_latest, write_to_textfile

from .models import SummaryReport
from .utils import split_server_key


class PrometheusMetricsExporter:
    """Export kdig summary statistics as Prometheus metrics."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up Prometheus metric definitions."""
        # File counts
        self.files_parsed = Gauge(
            'kdig_files_parsed_total',
            'Number of files that held usable kdig output',
            [],
            registry=self.registry
        )
        self.files_skipped = Gauge(
            'kdig_files_skipped_total',
            'Number of candidate files skipped',
            [],
            registry=self.registry
        )

        # Query time
        self.query_time = Gauge(
            'kdig_query_time_ms',
            'Query time statistics in milliseconds',
            ['stat'],
            registry=self.registry
        )

        # Response size
        self.response_size = Gauge(
            'kdig_response_size_bytes',
            'Response size statistics in bytes',
            ['stat'],
            registry=self.registry
        )
        self.response_size_total = Gauge(
            'kdig_response_size_bytes_total',
            'Sum of all response sizes in bytes',
            [],
            registry=self.registry
        )

        # Distributions
        self.server_queries = Gauge(
            'kdig_server_queries_total',
            'Number of queries sent to each server',
            ['server', 'port'],
            registry=self.registry
        )
        self.protocol_queries = Gauge(
            'kdig_protocol_queries_total',
            'Number of queries per transport protocol',
            ['protocol'],
            registry=self.registry
        )

    def export_report(self, report: SummaryReport, parsed: Optional[int] = None, skipped: int = 0):
        """Set every gauge from a summary report."""
        self.files_parsed.set(report.total_records if parsed is None else parsed)
        self.files_skipped.set(skipped)

        self.query_time.labels(stat='min').set(report.query_time.min)
        self.query_time.labels(stat='max').set(report.query_time.max)
        self.query_time.labels(stat='avg').set(report.query_time.mean)
        self.query_time.labels(stat='median').set(report.query_time.median)

        self.response_size.labels(stat='min').set(report.response_size.min)
        self.response_size.labels(stat='max').set(report.response_size.max)
        self.response_size.labels(stat='avg').set(report.response_size.mean)
        self.response_size_total.set(report.response_size.total)

        for server_key, count in report.server_counts.items():
            server, port = split_server_key(server_key)
            self.server_queries.labels(server=server, port=port).set(count)

        for protocol, count in report.protocol_counts.items():
            self.protocol_queries.labels(protocol=protocol).set(count)

    def generate(self) -> bytes:
        """Return the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)

    def write_textfile(self, path: str):
        """Write the registry to a file for the node_exporter textfile collector."""
        write_to_textfile(path, self.registry)
