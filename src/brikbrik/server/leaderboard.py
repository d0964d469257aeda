"""Single global high-score record.

Only the best score is kept. ``save`` is a compare-and-replace: it fails with
``RecordNotHigherError`` unless the new score is strictly greater than the
stored one.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import RecordNotHigherError


logger = logging.getLogger(__name__)

DEFAULT_NAME = "Anonymous"


@dataclass(frozen=True)
class LeaderboardRecord:
    name: str
    score: int
    date: str

    @classmethod
    def create(cls, name: str, score: int) -> "LeaderboardRecord":
        return cls(
            name=(name or "").strip() or DEFAULT_NAME,
            score=int(score),
            date=datetime.now(timezone.utc).isoformat(),
        )

    @classmethod
    def from_dict(cls, data: Any) -> Optional["LeaderboardRecord"]:
        if not isinstance(data, dict):
            return None
        score = data.get("score")
        name = data.get("name")
        if isinstance(score, bool) or not isinstance(score, int) or not name:
            return None
        return cls(name=str(name), score=score, date=str(data.get("date", "")))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Leaderboard:
    def __init__(self) -> None:
        self._lock = threading.Lock()

    def _read(self) -> Optional[LeaderboardRecord]:
        raise NotImplementedError

    def _write(self, record: LeaderboardRecord) -> None:
        raise NotImplementedError

    def top(self) -> Optional[LeaderboardRecord]:
        with self._lock:
            return self._read()

    def save(self, name: str, score: int) -> LeaderboardRecord:
        with self._lock:
            current = self._read()
            if current is not None and score <= current.score:
                raise RecordNotHigherError(score, current.score)
            record = LeaderboardRecord.create(name, score)
            self._write(record)
        logger.info("New top record: %s - %d", record.name, record.score)
        return record


class MemoryLeaderboard(Leaderboard):
    def __init__(self, record: Optional[LeaderboardRecord] = None) -> None:
        super().__init__()
        self._record = record

    def _read(self) -> Optional[LeaderboardRecord]:
        return self._record

    def _write(self, record: LeaderboardRecord) -> None:
        self._record = record


class JsonFileLeaderboard(Leaderboard):
    """Record persisted as one JSON value: the record object or ``null``."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        with self._lock:
            if not self.path.exists():
                self._dump(None)
                logger.info("Top record file initialized at %s (no existing record)", self.path)
            else:
                record = self._read()
                if record is not None:
                    logger.info("Top record loaded from %s: %s - %d", self.path, record.name, record.score)

    def _read(self) -> Optional[LeaderboardRecord]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.error("Could not read top record from %s: %s", self.path, exc)
            return None
        return LeaderboardRecord.from_dict(data)

    def _write(self, record: LeaderboardRecord) -> None:
        self._dump(record.to_dict())

    def _dump(self, data: Optional[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp, self.path)
