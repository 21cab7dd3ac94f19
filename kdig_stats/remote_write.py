"""Client for sending kdig summary metrics via Prometheus remote write."""

import sys
import time
from datetime import datetime
from typing import Any, Dict, Optional

import requests
import snappy
from google.protobuf.json_format import MessageToJson

from prometheus_remote_writer.proto import remote_pb2 as prompb_pb2
from prometheus_remote_writer.proto import types_pb2

from .models import SummaryReport
from .utils import split_server_key


class RemoteWriteClient:
    """Client for sending kdig summary metrics via remote write."""

    def __init__(self, remote_write_url: str, headers: Optional[Dict[str, str]] = None, instance_label: str = 'kdig', verbose: bool = False):
        self.remote_write_url = remote_write_url
        self.headers = headers or {}
        self.headers.setdefault('Content-Type', 'application/x-protobuf')
        self.headers.setdefault('Content-Encoding', 'snappy')
        self.instance_label = instance_label  # Value for the instance label
        self.verbose = verbose

    def send_report(self, report: SummaryReport, parsed: Optional[int] = None, skipped: int = 0,
                    timestamp_ms: Optional[int] = None, dry_run: bool = False,
                    debug_file: Optional[str] = None) -> bool:
        """Send a summary report to the remote write endpoint.

        Args:
            report: Summary statistics to send
            parsed: Number of parsed files (default: report.total_records)
            skipped: Number of skipped files
            timestamp_ms: Sample timestamp in milliseconds (default: now)
            dry_run: If True, build the payload but skip sending to endpoint
            debug_file: Optional path to save the uncompressed payload as JSON

        Returns:
            True if successful, False otherwise
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        try:
            write_request = self.build_write_request(report, timestamp_ms, parsed=parsed, skipped=skipped)

            num_timeseries = len(write_request.timeseries)
            print(f"Prepared {num_timeseries} time series at {datetime.fromtimestamp(timestamp_ms / 1000.0).isoformat()}", file=sys.stderr)

            data = write_request.SerializeToString()

            if debug_file:
                self._write_debug_file(write_request, debug_file)

            if dry_run:
                print("Dry-run mode: Skipping actual send to endpoint", file=sys.stderr)
                return True

            compressed_data = snappy.compress(data)
            print(f"Sending {len(compressed_data)} bytes (uncompressed: {len(data)} bytes)", file=sys.stderr)

            response = requests.post(
                self.remote_write_url,
                data=compressed_data,
                headers=self.headers,
                timeout=30
            )

            if response.status_code == 200 or response.status_code == 204:
                print(f"Successfully sent metrics (status {response.status_code})", file=sys.stderr)
                return True
            else:
                print(f"Error sending metrics: {response.status_code} - {response.text}", file=sys.stderr)
                print(f"Response headers: {dict(response.headers)}", file=sys.stderr)
                return False
        except requests.exceptions.ConnectionError:
            print(f"Connection error: Could not connect to {self.remote_write_url}", file=sys.stderr)
            print("  Make sure Prometheus is running and the remote write receiver is enabled", file=sys.stderr)
            print("  Start Prometheus with: --web.enable-remote-write-receiver", file=sys.stderr)
            return False
        except requests.exceptions.RequestException as e:
            print(f"Error in remote write: {e}", file=sys.stderr)
            return False

    def build_write_request(self, report: SummaryReport, timestamp_ms: int,
                            parsed: Optional[int] = None, skipped: int = 0):
        """Convert a summary report into a remote write request with one sample per series."""
        write_request = prompb_pb2.WriteRequest()  # type: ignore
        time_series_map: Dict[tuple, Any] = {}

        def add(metric_name: str, labels: Dict[str, str], value: float):
            self._add_sample_to_map(time_series_map, metric_name, labels, value, timestamp_ms)

        add('kdig_files_parsed_total', {}, report.total_records if parsed is None else parsed)
        add('kdig_files_skipped_total', {}, skipped)

        add('kdig_query_time_ms', {'stat': 'min'}, report.query_time.min)
        add('kdig_query_time_ms', {'stat': 'max'}, report.query_time.max)
        add('kdig_query_time_ms', {'stat': 'avg'}, report.query_time.mean)
        add('kdig_query_time_ms', {'stat': 'median'}, report.query_time.median)

        add('kdig_response_size_bytes', {'stat': 'min'}, report.response_size.min)
        add('kdig_response_size_bytes', {'stat': 'max'}, report.response_size.max)
        add('kdig_response_size_bytes', {'stat': 'avg'}, report.response_size.mean)
        add('kdig_response_size_bytes_total', {}, report.response_size.total)

        for server_key, count in report.servers_by_count():
            server, port = split_server_key(server_key)
            add('kdig_server_queries_total', {'server': server, 'port': port}, count)

        for protocol, count in report.protocols_by_count():
            add('kdig_protocol_queries_total', {'protocol': protocol}, count)

        for time_series in time_series_map.values():
            new_ts = write_request.timeseries.add()
            new_ts.CopyFrom(time_series)

        return write_request

    def _write_debug_file(self, write_request, debug_file: str) -> None:
        """Save the uncompressed payload as JSON."""
        try:
            # protobuf 26.x+ renamed including_default_value_fields
            json_data = MessageToJson(write_request, always_print_fields_with_no_presence=True)  # type: ignore[call-arg]
        except TypeError:
            json_data = MessageToJson(write_request, including_default_value_fields=True)  # type: ignore[call-arg]
        try:
            with open(debug_file, 'w', encoding='utf-8') as f:
                f.write(json_data)
            print(f"Saved uncompressed payload as JSON ({len(json_data)} bytes) to {debug_file}", file=sys.stderr)
        except OSError as e:
            print(f"Warning: Failed to write debug file {debug_file}: {e}", file=sys.stderr)

    def _print_metric_sample(self, time_series, timestamp_ms: int, value: float) -> None:
        """Print a single metric sample in verbose mode."""
        metric_name = None
        labels = {}
        for label in time_series.labels:
            if label.name == '__name__':
                metric_name = label.value
            else:
                labels[label.name] = label.value

        label_str = ','.join(f'{k}="{v}"' for k, v in sorted(labels.items()))
        metric_str = f'{metric_name}{{{label_str}}}'

        timestamp_dt = datetime.fromtimestamp(timestamp_ms / 1000.0)
        print(f"{timestamp_dt.isoformat()} {metric_str} {value}")

    def _add_sample_to_map(self, time_series_map: Dict[tuple, Any], metric_name: str, labels: Dict[str, str], value: float, timestamp_ms: int):
        """Add a sample to the time series map, grouping by metric name and labels."""
        labels_with_instance = labels.copy()
        labels_with_instance['instance'] = self.instance_label

        sorted_labels = tuple(sorted(labels_with_instance.items()))
        key = (metric_name, sorted_labels)

        if key not in time_series_map:
            time_series = types_pb2.TimeSeries()  # type: ignore

            label = time_series.labels.add()
            label.name = '__name__'
            label.value = metric_name

            for key_name, val in labels_with_instance.items():
                label = time_series.labels.add()
                label.name = key_name
                label.value = str(val)

            time_series_map[key] = time_series

        sample = time_series_map[key].samples.add()
        sample.value = value
        sample.timestamp = timestamp_ms

        if self.verbose:
            self._print_metric_sample(time_series_map[key], timestamp_ms, value)
