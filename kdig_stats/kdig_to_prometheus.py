#!/usr/bin/env python3
"""
Summarize a directory of kdig outputs and optionally export the summary
as Prometheus metrics, to a textfile or via Prometheus remote write.
"""

import argparse
import re
import sys
from typing import List, Optional

from .errors import KdigStatsError
from .exporter import PrometheusMetricsExporter
from .report import print_summary
from .stats import compute_summary
from .utils import analyze_directory, prepare_headers, send_metrics_remote_write


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Analyze kdig output files and report query statistics'
    )
    parser.add_argument(
        'input',
        help='Path to the directory containing .txt files with kdig output'
    )
    parser.add_argument(
        '-r', '--recursive',
        action='store_true',
        help='Enable recursive directory traversal'
    )
    parser.add_argument(
        '-p', '--pattern',
        help='Regex pattern to match filenames (applied to basename only)'
    )
    parser.add_argument(
        '--metrics-file',
        help='Write the summary as Prometheus text exposition to this file'
    )
    parser.add_argument(
        '--remote-write-url',
        help='Prometheus remote write endpoint URL'
    )
    parser.add_argument(
        '--remote-write-header',
        action='append',
        help='Additional header for remote write (format: Key=Value)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Build remote write payload without sending'
    )
    parser.add_argument(
        '--instance-label',
        default='kdig',
        help='Value for the instance label added to all metrics (default: kdig)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print each metric sample sent via remote write to stdout'
    )
    parser.add_argument(
        '--debug-file',
        help='Save the uncompressed remote write payload as JSON to the specified file for debugging'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    if args.pattern is not None:
        try:
            re.compile(args.pattern)
        except re.error as e:
            print(f"Error: Invalid pattern '{args.pattern}': {e}", file=sys.stderr)
            return 1

    try:
        _, result = analyze_directory(args.input, recursive=args.recursive, pattern=args.pattern)
    except KdigStatsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = compute_summary(result.records)
    print_summary(report)

    if args.metrics_file:
        exporter = PrometheusMetricsExporter()
        exporter.export_report(report, parsed=result.parsed_count, skipped=result.skipped_count)
        try:
            exporter.write_textfile(args.metrics_file)
        except OSError as e:
            print(f"Error: Could not write metrics file {args.metrics_file}: {e}", file=sys.stderr)
            return 1
        print(f"Wrote metrics to {args.metrics_file}")

    if args.remote_write_url:
        headers = prepare_headers(args.remote_write_header)
        sent = send_metrics_remote_write(
            args.remote_write_url, headers, report, args.instance_label,
            parsed=result.parsed_count, skipped=result.skipped_count,
            verbose=args.verbose, dry_run=args.dry_run, debug_file=args.debug_file
        )
        if not sent:
            return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
