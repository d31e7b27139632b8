"""Watch the input directory and rebuild files as they change."""

import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .builder import build_site, compile_path
from .buildlog import BuildLog
from .config import SiteConfig
from .errors import MdmakeError
from .walker import walk_files


POLL_INTERVAL = 1.0


def modified_time(path: Path) -> int:
    """Modification time in nanoseconds; 0 when it cannot be read."""
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return 0


class ChangeMonitor:
    """
    Polling watcher for one input tree.

    - prime(): full build, then record the mtime of every input file
    - tick(): rebuild files that are new or have a newer mtime
    - run(stop): prime, then tick every ``interval`` seconds until stopped

    Deleted files are not detected; their output stays until the next full
    build.
    """

    def __init__(
        self,
        config: SiteConfig,
        compile_func: Callable[[SiteConfig, Path], Path] = compile_path,
        interval: float = POLL_INTERVAL,
        log: Optional[BuildLog] = None,
    ):
        self.config = config
        self.compile_func = compile_func
        self.interval = interval
        self.log = log or BuildLog()
        self.registry: Dict[Path, int] = {}

    def snapshot(self) -> None:
        """Record the current mtime of every input file."""
        try:
            paths = walk_files(self.config.input_dir)
        except OSError:
            return
        for path in paths:
            self.registry[path] = modified_time(path)

    def prime(self) -> None:
        build_site(self.config, self.log)
        self.snapshot()

    def _recompile(self, path: Path) -> bool:
        try:
            self.compile_func(self.config, path)
        except MdmakeError as e:
            self.log.error(str(e), source=str(path))
            return False
        return True

    def tick(self) -> List[Path]:
        """Poll once.

        Returns:
            Paths that were compiled during this tick.
        """
        try:
            paths = walk_files(self.config.input_dir)
        except OSError:
            # retried on the next tick
            return []

        compiled = []
        for path in paths:
            current = modified_time(path)
            previous = self.registry.get(path)

            if previous is None:
                self.registry[path] = current
                self.log.info(
                    f"New File has been added: {path}!\nCompiling...",
                    event="added",
                    source=str(path),
                )
            elif current > previous:
                self.registry[path] = current
                self.log.info(
                    f"File has been modified: {path}!\nRecompiling...",
                    event="modified",
                    source=str(path),
                )
            else:
                continue

            if self._recompile(path):
                compiled.append(path)
        return compiled

    def run(self, stop: Optional[threading.Event] = None) -> None:
        """Prime, then poll until ``stop`` is set."""
        stop = stop or threading.Event()
        self.prime()
        while not stop.is_set():
            self.tick()
            stop.wait(self.interval)


def watch(config: SiteConfig, log: Optional[BuildLog] = None) -> None:
    """Watch until interrupted with Ctrl+C."""
    monitor = ChangeMonitor(config, log=log)
    stop = threading.Event()
    print(f"Watching {config.input_dir} for changes. Press Ctrl+C to stop")
    try:
        monitor.run(stop)
    except KeyboardInterrupt:
        stop.set()
        print("\nStopped.")
