"""Utility functions for locating, parsing and exporting kdig output."""

import os
import re
import sys
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Union

from .errors import InputDirectoryError, NoInputFilesError, NoValidRecordsError
from .models import CollectionResult, SummaryReport
from .parser import KdigParser

DEFAULT_EXTENSION = 'txt'


def split_server_key(server_key: str) -> Tuple[str, str]:
    """Split a "server:port" key on its last colon so IPv6 servers stay intact."""
    server, _, port = server_key.rpartition(':')
    return server, port


def prepare_headers(remote_write_headers: Optional[List[str]]) -> Dict[str, str]:
    """Prepare headers dictionary from command-line arguments."""
    headers = {}
    if remote_write_headers:
        for header in remote_write_headers:
            if '=' in header:
                key, value = header.split('=', 1)
                headers[key] = value
    return headers


def validate_input_directory(directory: str) -> None:
    if not os.path.exists(directory):
        raise InputDirectoryError(f"Input path does not exist: {directory}")
    if not os.path.isdir(directory):
        raise InputDirectoryError(f"Input path is not a directory: {directory}")


def find_kdig_files(directory: str, recursive: bool = False,
                    pattern: Union[str, Pattern[str], None] = None,
                    extension: str = DEFAULT_EXTENSION) -> List[str]:
    """Find candidate kdig output files in a directory.

    Args:
        directory: Directory to search
        recursive: Descend into sub-directories (default: direct children only)
        pattern: Regex searched in each file's basename
        extension: File extension to accept, compared case-insensitively

    Returns:
        Sorted list of matching file paths
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    suffix = '.' + extension.lower()

    found = []
    for root, dirs, files in os.walk(directory):
        if not recursive:
            dirs[:] = []
        for name in files:
            path = os.path.join(root, name)
            if not os.path.isfile(path):
                continue
            if not name.lower().endswith(suffix) or name.lower() == suffix:
                continue
            if pattern is not None and not pattern.search(name):
                continue
            found.append(path)

    return sorted(found)


def collect_records(paths: Iterable[str], parser: Optional[KdigParser] = None) -> CollectionResult:
    """Parse each file in turn, counting parsed and skipped files.

    Files that cannot be read are reported on stderr and skipped; files
    without complete kdig output are skipped silently.
    """
    parser = parser or KdigParser()
    result = CollectionResult()

    for path in paths:
        try:
            stats = parser.parse_file(path)
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error parsing {path}: {e}", file=sys.stderr)
            result.errors.append((path, str(e)))
            result.skipped_count += 1
            continue

        if stats is None:
            result.skipped_count += 1
        else:
            result.records.append(stats)
            result.parsed_count += 1

    return result


def analyze_directory(directory: str, recursive: bool = False,
                      pattern: Optional[str] = None) -> Tuple[List[str], CollectionResult]:
    """Locate and parse every candidate file under a directory.

    Raises:
        InputDirectoryError: directory is missing or not a directory
        NoInputFilesError: no candidate files matched
        NoValidRecordsError: candidates were found but none parsed
    """
    validate_input_directory(directory)

    files = find_kdig_files(directory, recursive=recursive, pattern=pattern)
    if not files:
        if pattern is not None:
            raise NoInputFilesError(
                f"No .{DEFAULT_EXTENSION} files matching pattern '{pattern}' found in directory: {directory}"
            )
        raise NoInputFilesError(f"No .{DEFAULT_EXTENSION} files found in directory: {directory}")

    print(f"Found {len(files)} .{DEFAULT_EXTENSION} file(s) to analyze...")

    result = collect_records(files)
    print(f"Successfully parsed {result.parsed_count} file(s), skipped {result.skipped_count} file(s)")

    if not result.records:
        raise NoValidRecordsError(f"No valid kdig output found in any of the .{DEFAULT_EXTENSION} files")

    return files, result


def send_metrics_remote_write(remote_write_url: str, headers: Dict[str, str],
                              report: SummaryReport, instance_label: str,
                              parsed: Optional[int] = None, skipped: int = 0,
                              verbose: bool = False, dry_run: bool = False,
                              debug_file: Optional[str] = None) -> bool:
    """Send summary metrics via remote write endpoint.

    Args:
        remote_write_url: URL of the Prometheus remote write endpoint
        headers: HTTP headers to include in the request
        report: Summary statistics to send
        instance_label: Value for the instance label added to all metrics
        parsed: Number of parsed files
        skipped: Number of skipped files
        verbose: Print verbose output for each metric
        dry_run: If True, process metrics but skip sending to endpoint
        debug_file: Optional path to save uncompressed payload data before compression
    """
    # Import here to avoid circular dependency
    from .remote_write import RemoteWriteClient

    if dry_run:
        print(f"\nDry-run mode: Processing metrics (not sending to {remote_write_url})...")
    else:
        print(f"\nSending metrics to {remote_write_url}...")

    client = RemoteWriteClient(remote_write_url, headers, instance_label, verbose)

    if client.send_report(report, parsed=parsed, skipped=skipped, dry_run=dry_run, debug_file=debug_file):
        if dry_run:
            print(f"Dry-run completed: Processed metrics for {report.total_records} record(s)")
        else:
            print(f"Successfully sent metrics for {report.total_records} record(s)")
        return True

    print("Failed to process/send metrics", file=sys.stderr)
    return False
