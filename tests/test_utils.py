"""Tests for fsmconvert.utils: atomic writes and logging."""

import io
import json

import pytest

from fsmconvert.utils.atomic import (
    AtomicFileWriter,
    AtomicWriteError,
    atomic_write,
    atomic_write_text,
)
from fsmconvert.utils.logging import (
    configure_logging,
    get_correlation_id,
    get_logger,
    machine_context,
    machine_var,
    set_correlation_id,
)


class TestAtomicWrite:
    def test_writes_text(self, tmp_path):
        path = tmp_path / "a" / "file.txt"
        atomic_write_text(path, "one\ntwo\n")
        assert path.read_bytes() == b"one\ntwo\n"

    def test_failure_keeps_original(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("original")
        with pytest.raises(AtomicWriteError):
            with atomic_write(path) as f:
                f.write("partial")
                raise RuntimeError("boom")
        assert path.read_text() == "original"
        assert list(tmp_path.iterdir()) == [path]


class TestAtomicFileWriter:
    def test_commit_writes_all(self, tmp_path):
        writer = AtomicFileWriter(tmp_path / "bundle")
        writer.add_text("States", "A\n")
        writer.add_bytes("WindowLayout.plist", b"\x00\x01")
        assert writer.pending == ["States", "WindowLayout.plist"]
        assert writer.commit() == 2
        assert (tmp_path / "bundle" / "States").read_text() == "A\n"
        assert (tmp_path / "bundle" / "WindowLayout.plist").read_bytes() == b"\x00\x01"
        assert writer.pending == []

    def test_context_manager_discards_on_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with AtomicFileWriter(tmp_path) as writer:
                writer.add_text("States", "A\n")
                raise RuntimeError("boom")
        assert not (tmp_path / "States").exists()

    def test_failed_commit_leaves_no_temp_files(self, tmp_path):
        (tmp_path / "States").mkdir()
        writer = AtomicFileWriter(tmp_path)
        writer.add_text("States", "A\n")
        writer.add_text("Language", "c\n")
        with pytest.raises(AtomicWriteError):
            writer.commit()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["States"]

    def test_prefixed_paths_create_subdirectories(self, tmp_path):
        writer = AtomicFileWriter(tmp_path)
        writer.add_text("Ping.machine/States", "A\n")
        writer.commit()
        assert (tmp_path / "Ping.machine" / "States").read_text() == "A\n"


class TestLogging:
    def test_json_events_carry_context(self):
        stream = io.StringIO()
        configure_logging(level="info", format_type="json", stream=stream)
        set_correlation_id("abc12345")
        with machine_context("Ping"):
            get_logger("test").info("machine_loaded", states=2)

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "machine_loaded"
        assert event["states"] == 2
        assert event["logger_name"] == "test"
        assert event["correlation_id"] == "abc12345"
        assert event["machine"] == "Ping"
        assert event["level"] == "info"
        assert machine_var.get() == ""

    def test_machine_context_resets_on_error(self):
        with pytest.raises(RuntimeError):
            with machine_context("Ping"):
                raise RuntimeError("boom")
        assert machine_var.get() == ""

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging(level="error", format_type="json", stream=stream)
        get_logger("test").warning("binding_file_unreadable")
        assert stream.getvalue() == ""

    def test_correlation_id_generated(self):
        set_correlation_id("")
        cid = get_correlation_id()
        assert len(cid) == 8
        assert get_correlation_id() == cid
