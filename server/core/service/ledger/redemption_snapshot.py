"""Flat-file snapshot of the redemption ledger."""
import json
import os
from datetime import datetime, timezone
from pathlib import Path

import logfire
from pydantic import TypeAdapter

from server.core.models.order_models import RedemptionRecord

_entries_adapter = TypeAdapter(list[tuple[str, RedemptionRecord]])


class RedemptionSnapshot:
    """
    Whole-file JSON snapshot: `{"records": [[token, record], ...], "lastUpdated": ...}`.

    Loaded once at startup and rewritten after every mutation. Writes go to a
    temporary file that replaces the snapshot, so a crash never leaves a
    half-written file behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, RedemptionRecord]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        entries = _entries_adapter.validate_python(raw.get("records") or [])
        logfire.info(f"Loaded {len(entries)} redemption records from {self.path}")
        return dict(entries)

    def save(self, records: dict[str, RedemptionRecord]) -> None:
        payload = {
            "records": _entries_adapter.dump_python(list(records.items()), mode="json", by_alias=True),
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, self.path)
