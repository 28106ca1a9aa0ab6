"""Export services for engine results.

Saves a computed result to a timestamped JSON file for later analysis.
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Optional

from assurvie.core.logging import get_logger

log = get_logger(__name__)


class ResultExporter:
    """Handles exporting of engine results."""

    def __init__(self, output_dir: str = "results"):
        """Initialize exporter.

        Args:
            output_dir: Directory where results will be saved.
        """
        self.output_dir = output_dir
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure output directory exists."""
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir, exist_ok=True)
            log.info("created_output_directory", path=self.output_dir)

    def save_result(
        self,
        kind: str,
        inputs: Dict[str, Any],
        result: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save one computation to a JSON file.

        Args:
            kind: Engine name, used as filename prefix (rachat, deces, frais).
            inputs: Input document as received.
            result: Result document as emitted.
            metadata: Optional metadata to include in the file.

        Returns:
            Path to the saved file.
        """
        now = datetime.now()
        filename = f"{kind}_{now.strftime('%Y%m%d_%H%M%S_%f')}.json"
        filepath = os.path.join(self.output_dir, filename)

        payload = {
            "metadata": {
                "timestamp": now.isoformat(),
                "engine": kind,
                **(metadata or {}),
            },
            "input": inputs,
            "result": result,
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("result_save_failed", path=filepath, error=str(e))
            raise

        log.info("result_saved", path=filepath, engine=kind)
        return filepath
