from __future__ import annotations

"""
Unit tests for the Scan Engine.

Drives run_scan through the in-memory filesystem to verify rendering,
report persistence, statistics, and fatal root handling.
"""

import errno
import io

from ckdu.core.pipeline.engine import run_scan
from ckdu.infra.reporting import ErrorReporter


def _scan(fs, **overrides):
    cfg = {"input_path": "root"}
    cfg.update(overrides)
    stream = io.StringIO()
    result = run_scan(
        cfg,
        reporter=ErrorReporter(stream=stream),
        probe=fs.probe,
        open_directory=fs.open_directory,
    )
    return result, stream.getvalue().splitlines()


def test_scan_renders_sorted_report(fake_fs):
    fake_fs.add_file("root/a.txt", 5)
    fake_fs.add_dir("root/sub")
    fake_fs.add_file("root/sub/x", 10, inode=500)
    fake_fs.add_link("root/sub/x", "root/sub/y")

    result, errors = _scan(fake_fs)

    assert result.ok
    assert errors == []
    assert result.lines == [
        "  15.0 B   root/",
        "  10.0 B     sub/",
        "  10.0 B       x",
        "  10.0 B       y",
        "   5.0 B     a.txt",
    ]
    assert result.unique_identities == 4
    assert result.summary["total_size"] == 15


def test_scan_collapses_configured_boring_dirs(fake_fs):
    fake_fs.add_dir("root/build")
    fake_fs.add_file("root/build/out.o", 2048)

    result, _ = _scan(fake_fs, boring_dirs=["build"])

    assert result.lines[-1].strip() == "..."
    assert result.root.total_size == 2048


def test_scan_reports_subtree_errors_but_succeeds(fake_fs):
    fake_fs.add_dir("root/locked")
    fake_fs.open_errors["root/locked"] = errno.EACCES
    fake_fs.add_file("root/f", 1)

    result, errors = _scan(fake_fs)

    assert result.ok
    assert result.error_count == 1
    assert len(errors) == 1
    assert "   0.0 B     locked/" in result.lines


def test_root_probe_failure_gives_error_result(fake_fs):
    fake_fs.stat_errors["root"] = errno.ENOENT

    result, errors = _scan(fake_fs)

    assert not result.ok
    assert result.root is None
    assert errors == [
        'Error ENOENT(2) occured when statting "root": No such file or directory.'
    ]
    assert result.error == errors[0]


def test_report_saved_to_output_path(fake_fs, tmp_path):
    fake_fs.add_file("root/f", 3)
    target = tmp_path / "reports" / "usage.txt"

    result, _ = _scan(fake_fs, output_path=str(target))

    assert result.output_path == str(target)
    assert target.read_text(encoding="utf-8").splitlines() == result.lines


def test_unwritable_output_path_does_not_fail_scan(fake_fs, tmp_path):
    fake_fs.add_file("root/f", 3)
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    result, _ = _scan(fake_fs, output_path=str(blocker / "report.txt"))

    assert result.ok
    assert result.output_path == ""


def test_scan_is_idempotent(fake_fs):
    fake_fs.add_dir("root/d")
    fake_fs.add_file("root/d/one", 1)
    fake_fs.add_file("root/two", 2)
    fake_fs.add_file("root/three", 2)

    first, _ = _scan(fake_fs)
    second, _ = _scan(fake_fs)

    assert first.lines == second.lines
