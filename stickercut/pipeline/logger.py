"""
PipelineLogger: Structured JSON logging for the sticker cutting pipeline
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_LOG_FILE = Path.home() / ".local/share/stickercut/debug.log"


class PipelineLogger:
    """Logger with per-image JSON records and debug modes"""

    def __init__(
        self,
        log_file: Optional[Path] = None,
        debug_mode: bool = False,
        verbose: bool = False,
    ):
        # No log file means records are kept in memory only
        self.log_file = log_file
        self.debug_mode = debug_mode
        self.verbose = verbose
        self.current_image: Optional[Dict[str, Any]] = None
        self.logs: list[Dict[str, Any]] = []

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("stickercut.pipeline")
        self.logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    def start_image(self, source: str):
        """Start logging for a new image"""
        self.current_image = {
            "image": source,
            "timestamp": datetime.now().isoformat(),
            "stages": [],
            "region_errors": [],
        }

    def log_stage(self, stage_name: str, **data: Any):
        """Append a stage entry (e.g. "s3_contours") to the current image record"""
        if self.current_image is None:
            raise RuntimeError("Must call start_image() before logging stages")

        stage_log = {
            "stage": stage_name,
            "timestamp": datetime.now().isoformat(),
            **data,
        }
        self.current_image["stages"].append(stage_log)

        if self.debug_mode:
            print(f"[{stage_name}] {json.dumps(data, indent=2)}")

    def log_region_error(self, stage: str, cell: Optional[tuple], message: str):
        """Record a skipped grid cell"""
        if self.current_image is not None:
            self.current_image["region_errors"].append(
                {"stage": stage, "cell": list(cell) if cell else None, "error": message}
            )
        self.log_warning(f"  Skipping cell {cell}: {message}")

    def log_info(self, message: str):
        """Log info message"""
        self.logger.info(message)
        if self.verbose:
            print(f"INFO: {message}")

    def log_warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)
        print(f"WARNING: {message}")

    def log_error(self, message: str, exc_info: bool = False):
        """Log error message"""
        self.logger.error(message, exc_info=exc_info)
        print(f"ERROR: {message}")

    def save_image_log(self):
        """Save current image log to file"""
        if self.current_image is None:
            return

        self.logs.append(self.current_image)

        if self.log_file is not None:
            with open(self.log_file, "a") as f:
                json.dump(self.current_image, f)
                f.write("\n")

        self.current_image = None
