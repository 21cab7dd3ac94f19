import pytest

from kdig_stats.models import KdigStats


KDIG_OUTPUT = """\
;; ->>HEADER<<- opcode: QUERY; status: NOERROR; id: 41473
;; Flags: qr rd ra; QUERY: 1; ANSWER: 1; AUTHORITY: 0; ADDITIONAL: 1

;; QUESTION SECTION:
;; example.com.        \t\tIN\tA

;; ANSWER SECTION:
example.com.        \t3600\tIN\tA\t93.184.216.34

;; Received 56 B
;; Time 2025-01-10 10:00:00 UTC
;; From 9.9.9.9@853(TLS) in 31.7 ms
"""


def make_record(query_time_ms=10.0, response_size_bytes=100, server='8.8.8.8', port=53, protocol='UDP'):
    return KdigStats(
        query_time_ms=query_time_ms,
        response_size_bytes=response_size_bytes,
        server=server,
        port=port,
        protocol=protocol,
    )


@pytest.fixture
def kdig_output():
    return KDIG_OUTPUT


@pytest.fixture
def kdig_dir(tmp_path):
    """Directory with two valid outputs, one partial output and one non-kdig file."""
    (tmp_path / 'query1.txt').write_text(KDIG_OUTPUT)
    (tmp_path / 'query2.TXT').write_text(';; Received 84 B\n;; From 127.0.0.1@53(UDP) in 12.5 ms\n')
    (tmp_path / 'partial.txt').write_text(';; Received 100 B\n')
    (tmp_path / 'notes.md').write_text(KDIG_OUTPUT)
    nested = tmp_path / 'nested'
    nested.mkdir()
    (nested / 'query3.txt').write_text(';; Received 120 B\n;; From 1.1.1.1@53(TCP) in 4.0 ms\n')
    return tmp_path
