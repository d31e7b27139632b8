"""Build event log: console output plus an optional JSON-lines file."""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


class BuildLog:
    """Echo build events and, if a log directory is set, append them to
    ``build-YYYY-MM-DD.jsonl`` there."""

    def __init__(self, log_dir: Optional[Path] = None, quiet: bool = False):
        self.log_dir = Path(log_dir).expanduser() if log_dir else None
        self.quiet = quiet
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def record(self, event: Dict[str, Any]):
        if self.log_dir is None:
            return
        today = datetime.now().strftime("%Y-%m-%d")
        log_file = self.log_dir / f"build-{today}.jsonl"

        event = {**event, "timestamp": datetime.now().isoformat()}

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")

    def info(self, message: str, **event: Any):
        if not self.quiet:
            print(message)
        if event:
            self.record(event)

    def error(self, message: str, **event: Any):
        print(f"error: {message}", file=sys.stderr)
        self.record({"event": "error", "message": message, **event})
