"""
IntentLedger: durable marker for in-flight feature additions.

A feature addition writes several files before the descriptor flag is
flipped. The intent record is written before the first file and removed
after the descriptor is saved, so a leftover record means the previous
run stopped part-way through.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcmod.logging_config import logger
from mcmod.paths import McmodPaths
from mcmod.utils import atomic_write_text


class IntentLedger:
    """
    Single-slot intent record stored at .mcmod/intent.json.

    Record format:
    {
      "feature": "fabric",
      "started_at": "2025-01-01T12:00:00",
      "steps": ["files", "settings.gradle", "gradle.properties"]
    }
    """

    def __init__(self, project_root: Path):
        self.path = McmodPaths(project_root).intent_file
        self._record: Optional[Dict[str, Any]] = None

    def read(self) -> Optional[Dict[str, Any]]:
        """
        Read a leftover intent record.

        Returns:
            The record, an {"feature": None} placeholder if the file is
            unreadable, or None if there is no record
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Unreadable intent record {self.path}: {e}")
            return {"feature": None, "steps": []}

    def begin(self, feature: str) -> Optional[Dict[str, Any]]:
        """
        Start tracking a feature addition.

        Returns:
            The stale record left by an interrupted run, if any
        """
        stale = self.read()
        if stale is not None:
            done = ", ".join(stale.get("steps") or []) or "no steps"
            logger.warning(
                f"Previous 'add {stale.get('feature')}' did not complete ({done}); "
                f"files it wrote will be overwritten"
            )

        self._record = {
            "feature": feature,
            "started_at": datetime.now().isoformat(timespec="seconds"),
            "steps": [],
        }
        self._write()
        logger.debug(f"Intent recorded: add {feature}")
        return stale

    def record_step(self, step: str) -> None:
        """Append a completed step to the current record."""
        if self._record is None:
            raise RuntimeError("record_step() called before begin()")
        self._record["steps"].append(step)
        self._write()

    @property
    def steps(self) -> List[str]:
        return list(self._record["steps"]) if self._record else []

    def complete(self) -> None:
        """Remove the record once the descriptor has been saved."""
        self._record = None
        if self.path.exists():
            self.path.unlink()
        # Leave no empty .mcmod/ behind in the user's project
        state_dir = self.path.parent
        if state_dir.is_dir() and not any(state_dir.iterdir()):
            state_dir.rmdir()
        logger.debug("Intent cleared")

    def _write(self) -> None:
        atomic_write_text(self.path, json.dumps(self._record, indent=2) + "\n")
