import pytest

from kdig_stats.kdig_to_prometheus import main


def test_main_prints_summary(kdig_dir, capsys):
    assert main([str(kdig_dir)]) == 0
    out = capsys.readouterr().out
    assert 'Found 3 .txt file(s) to analyze...' in out
    assert 'Successfully parsed 2 file(s), skipped 1 file(s)' in out
    assert 'Total files analyzed: 2' in out
    assert '  9.9.9.9:853 - 1 queries' in out


def test_main_recursive_with_pattern(kdig_dir, capsys):
    assert main([str(kdig_dir), '--recursive', '--pattern', r'query\d']) == 0
    out = capsys.readouterr().out
    assert 'Found 3 .txt file(s) to analyze...' in out
    assert '  TCP: 1' in out


def test_main_missing_directory(tmp_path, capsys):
    assert main([str(tmp_path / 'missing')]) == 1
    assert 'Error: Input path does not exist' in capsys.readouterr().err


def test_main_no_candidates(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert 'Error: No .txt files found in directory' in capsys.readouterr().err


def test_main_no_valid_records(tmp_path, capsys):
    (tmp_path / 'partial.txt').write_text(';; Received 100 B\n')
    assert main([str(tmp_path)]) == 1
    assert 'Error: No valid kdig output found' in capsys.readouterr().err


def test_main_invalid_pattern(kdig_dir, capsys):
    assert main([str(kdig_dir), '--pattern', '(']) == 1
    assert "Error: Invalid pattern '('" in capsys.readouterr().err


def test_main_writes_metrics_file(kdig_dir, tmp_path):
    metrics_file = tmp_path / 'kdig.prom'
    assert main([str(kdig_dir), '--metrics-file', str(metrics_file)]) == 0
    content = metrics_file.read_text()
    assert 'kdig_files_parsed_total 2.0' in content
    assert 'kdig_files_skipped_total 1.0' in content


@pytest.mark.parametrize('sent, expected', [(True, 0), (False, 1)])
def test_main_remote_write(kdig_dir, monkeypatch, sent, expected):
    calls = []

    def fake_send(url, headers, report, instance_label, **kwargs):
        calls.append((url, headers, report, instance_label, kwargs))
        return sent

    monkeypatch.setattr('kdig_stats.kdig_to_prometheus.send_metrics_remote_write', fake_send)
    argv = [
        str(kdig_dir),
        '--remote-write-url', 'http://prom/api/v1/write',
        '--remote-write-header', 'X-Scope-OrgID=team',
        '--dry-run',
    ]
    assert main(argv) == expected

    url, headers, report, instance_label, kwargs = calls[0]
    assert url == 'http://prom/api/v1/write'
    assert headers == {'X-Scope-OrgID': 'team'}
    assert report.total_records == 2
    assert instance_label == 'kdig'
    assert kwargs['dry_run'] is True
    assert kwargs['skipped'] == 1
