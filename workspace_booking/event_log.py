from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable
import shutil

import yaml


class EventLogStorageError(RuntimeError):
    pass


class EventJournal:
    """Ordered record of booking events.

    Events are kept in memory. When ``path`` is given every event is also
    mirrored to that YAML file as a list of ``{event_time, event_type,
    payload}`` mappings; an unreadable file is backed up and started over.
    An event whose write fails is not kept.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._events: list[dict[str, Any]] = []
        if self.path is not None:
            self._ensure_file(self.path)
            self._events = self._read_yaml_list(self.path)

    def _ensure_file(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text("[]\n", encoding="utf-8")

    def _read_yaml_list(self, path: Path) -> list[dict[str, Any]]:
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            path.write_text("[]\n", encoding="utf-8")
            return []
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            return self._recover_corrupted_yaml(path, error)

        if payload is None:
            return []
        if not isinstance(payload, list):
            return self._recover_corrupted_yaml(path, ValueError("top-level YAML is not a list"))

        return [row for row in payload if isinstance(row, dict)]

    def _write_yaml_list(self, path: Path, rows: list[dict[str, Any]]) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(rows, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        except OSError as error:
            raise EventLogStorageError(f"Failed to write YAML file: {path}") from error
        finally:
            if temp_path.is_file():
                temp_path.unlink(missing_ok=True)

    def _recover_corrupted_yaml(self, path: Path, error: Exception) -> list[dict[str, Any]]:
        timestamp = self._clock().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        backup_name: str | None = backup_path.name
        try:
            if path.exists():
                shutil.copy2(path, backup_path)
        except OSError:
            backup_name = None

        path.write_text("[]\n", encoding="utf-8")
        return [
            self._make_event(
                "EVENT_LOG_RECOVERED",
                {
                    "file": path.name,
                    "backup": backup_name,
                    "reason": str(error),
                },
            )
        ]

    def _make_event(self, event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "event_time": self._clock().isoformat(timespec="seconds"),
            "event_type": event_type,
            "payload": payload,
        }

    def record(self, event_type: str, payload: dict[str, Any]) -> dict[str, Any]:
        event = self._make_event(event_type, payload)
        if self.path is not None:
            self._write_yaml_list(self.path, [*self._events, event])
        self._events.append(event)
        return event

    def events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        return [dict(event) for event in self._events if event_type is None or event["event_type"] == event_type]

    def __len__(self) -> int:
        return len(self._events)
