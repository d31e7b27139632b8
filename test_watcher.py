#!/usr/bin/env python3
"""
Watch mode tests
- new and modified files are compiled once
- unchanged and deleted files are ignored
- failed walks and failed compiles keep the loop alive
"""
import os
import sys
import tempfile
import threading
from pathlib import Path
from unittest.mock import MagicMock

# add module path
sys.path.insert(0, str(Path(__file__).parent))

import mdmake.watcher as watcher
from mdmake.buildlog import BuildLog
from mdmake.builder import compile_path
from mdmake.config import SiteConfig
from mdmake.errors import SourceReadError
from mdmake.watcher import ChangeMonitor, modified_time


def make_config(root: Path) -> SiteConfig:
    src = root / "src"
    src.mkdir()
    (src / "a.md").write_text("# A\n", encoding="utf-8")
    (src / "sub").mkdir()
    (src / "sub" / "b.md").write_text("# B\n", encoding="utf-8")
    return SiteConfig(input_dir=src, output_dir=root / "out")


def bump_mtime(path: Path, seconds: int = 5) -> None:
    stamp = os.stat(path).st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(stamp, stamp))


class RecordingCompiler:
    def __init__(self):
        self.calls = []

    def __call__(self, config, path):
        self.calls.append(path)
        return compile_path(config, path)


def primed_monitor(config: SiteConfig):
    compiler = RecordingCompiler()
    monitor = ChangeMonitor(config, compile_func=compiler, interval=0, log=BuildLog(quiet=True))
    monitor.prime()
    return monitor, compiler


def test_prime_builds_and_snapshots():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)

        assert (config.output_dir / "a.html").is_file()
        assert (config.output_dir / "sub" / "b.html").is_file()
        assert set(monitor.registry) == {config.input_dir / "a.md", config.input_dir / "sub" / "b.md"}
        assert compiler.calls == []


def test_unchanged_tree_triggers_nothing():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)

        assert monitor.tick() == []
        assert monitor.tick() == []
        assert compiler.calls == []


def test_modified_file_compiled_once():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)
        source = config.input_dir / "a.md"

        source.write_text("# A changed\n", encoding="utf-8")
        bump_mtime(source)

        assert monitor.tick() == [source]
        assert monitor.registry[source] == os.stat(source).st_mtime_ns
        assert "<title>A changed</title>" in (config.output_dir / "a.html").read_text(encoding="utf-8")

        assert monitor.tick() == []
        assert compiler.calls == [source]


def test_new_file_compiled_once():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)

        new_file = config.input_dir / "sub" / "c.md"
        new_file.write_text("# C\n", encoding="utf-8")

        assert monitor.tick() == [new_file]
        assert (config.output_dir / "sub" / "c.html").is_file()
        assert new_file in monitor.registry
        assert monitor.tick() == []
        assert compiler.calls == [new_file]


def test_new_resource_copied():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, _ = primed_monitor(config)

        data = config.input_dir / "data.bin"
        data.write_bytes(b"\x00\x01\x02")

        assert monitor.tick() == [data]
        assert (config.output_dir / "data.bin").read_bytes() == b"\x00\x01\x02"


def test_deleted_file_is_ignored():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)
        source = config.input_dir / "a.md"

        source.unlink()

        assert monitor.tick() == []
        assert source in monitor.registry
        assert (config.output_dir / "a.html").is_file()
        assert compiler.calls == []


def test_failed_walk_is_skipped(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor, compiler = primed_monitor(config)

        def broken_walk(_root):
            raise PermissionError("denied")

        monkeypatch.setattr(watcher, "walk_files", broken_walk)
        assert monitor.tick() == []

        monkeypatch.undo()
        bump_mtime(config.input_dir / "a.md")
        assert monitor.tick() == [config.input_dir / "a.md"]


def test_failed_compile_is_reported(capsys):
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        failing = MagicMock(side_effect=SourceReadError("Failed to read markdown file", Path("a.md")))
        monitor = ChangeMonitor(config, compile_func=failing, interval=0, log=BuildLog(quiet=True))
        monitor.prime()

        bump_mtime(config.input_dir / "a.md")
        assert monitor.tick() == []
        assert failing.call_count == 1
        assert "Failed to read markdown file: a.md" in capsys.readouterr().err

        # the new mtime was recorded, so the failure is not retried every tick
        assert monitor.tick() == []
        assert failing.call_count == 1


def test_run_stops_when_event_set():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor = ChangeMonitor(config, interval=0, log=BuildLog(quiet=True))
        stop = threading.Event()
        ticks = []

        def counting_tick():
            ticks.append(1)
            if len(ticks) == 3:
                stop.set()
            return []

        monitor.tick = counting_tick
        monitor.run(stop)

        assert len(ticks) == 3
        assert (config.output_dir / "a.html").is_file()


def test_run_with_preset_stop_only_primes():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = make_config(Path(tmpdir))
        monitor = ChangeMonitor(config, interval=0, log=BuildLog(quiet=True))
        stop = threading.Event()
        stop.set()

        monitor.run(stop)
        assert len(monitor.registry) == 2


def test_modified_time_of_missing_file():
    assert modified_time(Path("/nonexistent/path/for/mdmake")) == 0
