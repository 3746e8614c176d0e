from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional, Dict

from recipe_assistant.config import Settings
from recipe_assistant.services.repo.json_repo import _locked  # reuse existing cross-platform lock

logger = logging.getLogger(__name__)


class MetricsLogger:
    """Append-only JSONL logger for latency metrics under data/.

    Writes one JSON object per line with fields:
      - ts: ISO timestamp (UTC)
      - kind: "latency"
      - name: short name (e.g., "generate_recipes", "ocr", "receipt_extract")
      - duration_ms: float
      - user: user id the request ran for
      - extra: optional dict with contextual fields
    """

    def __init__(self, settings: Settings, filename: str = "latency_log.jsonl") -> None:
        self.path = os.path.join(settings.data_dir, filename)

    def log_latency(
        self,
        name: str,
        duration_ms: float,
        user_id: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "kind": "latency",
            "name": name,
            "duration_ms": round(float(duration_ms), 3),
        }
        if user_id:
            entry["user"] = user_id
        if extra:
            entry["extra"] = extra
        line = (json.dumps(entry, ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")
        try:
            with _locked(self.path) as f:
                f.seek(0, os.SEEK_END)
                f.write(line)
                f.flush()
        except Exception as e:
            # Metrics never affect user flows.
            logger.debug("Dropping latency metric %s: %s", name, e)
