"""
Cycle journal.

Append-only JSONL files under one directory, written by the calling layer
after each completed cycle. The hedge strategy itself keeps nothing
between cycles.
"""

import json
import time
from collections import deque
from pathlib import Path
from typing import Any, Dict, List


class StateStore:
    """
    JSONL journal keyed by stream name (one file per stream).

    Streams:
    - cycles: snapshot fields plus the decided action and execution status
    """

    def __init__(self, data_dir: str = "data/state"):
        self.root = Path(data_dir)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, stream: str) -> Path:
        return self.root / f"{stream}.jsonl"

    def append_jsonl(self, stream: str, record: Dict[str, Any]) -> None:
        """Append one record, stamped with the wall-clock time it was written."""
        entry = {"recorded_at": time.time(), **record}
        with self.path_for(stream).open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry, default=str) + "\n")

    def read_jsonl(self, stream: str, limit: int = 1000) -> List[Dict[str, Any]]:
        """Return the last `limit` records of a stream (oldest first)."""
        path = self.path_for(stream)
        if not path.exists():
            return []
        with path.open("r", encoding="utf-8") as fh:
            tail = deque((line for line in fh if line.strip()), maxlen=limit)
        return [json.loads(line) for line in tail]
