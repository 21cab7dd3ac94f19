from prometheus_client import CollectorRegistry

from kdig_stats.exporter import PrometheusMetricsExporter
from kdig_stats.stats import compute_summary

from conftest import make_record


def build_exporter():
    report = compute_summary([
        make_record(query_time_ms=10.0, response_size_bytes=100, server='8.8.8.8', protocol='UDP'),
        make_record(query_time_ms=20.0, response_size_bytes=200, server='8.8.8.8', protocol='UDP'),
        make_record(query_time_ms=60.0, response_size_bytes=300, server='2001:db8::1', port=853, protocol='TLS'),
    ])
    registry = CollectorRegistry()
    exporter = PrometheusMetricsExporter(registry)
    exporter.export_report(report, parsed=3, skipped=2)
    return registry, exporter


def test_export_report_sets_gauges():
    registry, _ = build_exporter()
    assert registry.get_sample_value('kdig_files_parsed_total') == 3
    assert registry.get_sample_value('kdig_files_skipped_total') == 2
    assert registry.get_sample_value('kdig_query_time_ms', {'stat': 'median'}) == 20.0
    assert registry.get_sample_value('kdig_query_time_ms', {'stat': 'avg'}) == 30.0
    assert registry.get_sample_value('kdig_response_size_bytes', {'stat': 'max'}) == 300
    assert registry.get_sample_value('kdig_response_size_bytes_total') == 600
    assert registry.get_sample_value('kdig_server_queries_total', {'server': '8.8.8.8', 'port': '53'}) == 2
    assert registry.get_sample_value('kdig_server_queries_total', {'server': '2001:db8::1', 'port': '853'}) == 1
    assert registry.get_sample_value('kdig_protocol_queries_total', {'protocol': 'TLS'}) == 1


def test_generate_and_write_textfile(tmp_path):
    _, exporter = build_exporter()
    assert b'kdig_protocol_queries_total{protocol="UDP"} 2.0' in exporter.generate()

    path = tmp_path / 'kdig.prom'
    exporter.write_textfile(str(path))
    assert 'kdig_response_size_bytes_total 600.0' in path.read_text()
