"""Parser package for kdig output statistics."""

from .models import KdigStats, SummaryReport
from .parser import KdigParser, parse_kdig_output
from .stats import compute_summary
from .exporter import PrometheusMetricsExporter

__all__ = [
    'KdigStats',
    'SummaryReport',
    'KdigParser',
    'parse_kdig_output',
    'compute_summary',
    'PrometheusMetricsExporter',
]
