"""Parser for kdig query output."""

import re
from typing import Optional

from .models import KdigStats

# ";; Received 84 B"
RECEIVED_PATTERN = re.compile(r';;\s+Received\s+(\d+)\s+B')
# ";; From 127.0.0.1@53(UDP) in 12.5 ms"
FROM_PATTERN = re.compile(r';;\s+From\s+([^@]+)@(\d+)\(([^)]+)\)\s+in\s+([\d.]+)\s+ms')

MAX_RESPONSE_SIZE = 2 ** 32 - 1
MAX_PORT = 2 ** 16 - 1


def _parse_unsigned(text: str, upper_bound: int) -> Optional[int]:
    """Parse an ASCII digit string, returning None when it does not fit in [0, upper_bound]."""
    if not text.isascii():
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    if value > upper_bound:
        return None
    return value


def _parse_float(text: str) -> Optional[float]:
    if not text.isascii():
        return None
    try:
        return float(text)
    except ValueError:
        return None


class KdigParser:
    """Parser for kdig query output.

    Every line is checked against both the "Received" and the "From" pattern.
    When a pattern matches several lines the last match wins, field by field:
    a number that fails to parse leaves the value from an earlier line in place.
    """

    def __init__(self, encoding: str = 'utf-8'):
        """Initialize the parser.

        Args:
            encoding: Text encoding used by parse_file (default: utf-8)
        """
        self.encoding = encoding

    def parse_file(self, file_path: str) -> Optional[KdigStats]:
        """Read a kdig output file and parse it.

        Raises OSError or UnicodeDecodeError when the file cannot be read.
        """
        with open(file_path, 'r', encoding=self.encoding) as f:
            content = f.read()
        return self.parse(content)

    def parse(self, content: str) -> Optional[KdigStats]:
        """Extract one record from kdig output, or None when any field is missing."""
        response_size: Optional[int] = None
        server: Optional[str] = None
        port: Optional[int] = None
        protocol: Optional[str] = None
        query_time: Optional[float] = None

        for line in content.split('\n'):
            if line.endswith('\r'):
                line = line[:-1]

            received_match = RECEIVED_PATTERN.search(line)
            if received_match:
                size = _parse_unsigned(received_match.group(1), MAX_RESPONSE_SIZE)
                if size is not None:
                    response_size = size

            from_match = FROM_PATTERN.search(line)
            if from_match:
                server = from_match.group(1).strip()
                parsed_port = _parse_unsigned(from_match.group(2), MAX_PORT)
                if parsed_port is not None:
                    port = parsed_port
                protocol = from_match.group(3).strip()
                parsed_time = _parse_float(from_match.group(4))
                if parsed_time is not None:
                    query_time = parsed_time

        if (query_time is None or response_size is None or server is None
                or port is None or protocol is None):
            return None

        return KdigStats(
            query_time_ms=query_time,
            response_size_bytes=response_size,
            server=server,
            port=port,
            protocol=protocol,
        )


def parse_kdig_output(content: str) -> Optional[KdigStats]:
    """Parse already-read kdig output text."""
    return KdigParser().parse(content)
