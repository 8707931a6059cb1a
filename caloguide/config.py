from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


class Settings:
    """Centralized configuration for the guided-tour engine and its flag API."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        data_root_default = base_dir.parent / "data"

        self.data_root: Path = Path(
            os.environ.get("CALO_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("CALO_DB_PATH") or (self.data_root / "calo.db")
        ).expanduser()
        # Administrative flag resets are disabled unless a key is configured.
        self.admin_key: Optional[str] = os.environ.get("CALO_ADMIN_KEY") or None
        self.log_level: str = os.environ.get("CALO_LOG_LEVEL", "INFO").upper()
        self.host: str = os.environ.get("CALO_HOST", "127.0.0.1")
        self.port: int = int(os.environ.get("CALO_PORT") or "8000")

        # ---- Tour timing ----
        self.measure_retries: int = int(os.environ.get("CALO_MEASURE_RETRIES") or "3")
        self.measure_retry_delay: float = float(
            os.environ.get("CALO_MEASURE_RETRY_DELAY") or "0.3"
        )
        self.build_settle_delay: float = float(
            os.environ.get("CALO_BUILD_SETTLE_DELAY") or "0.5"
        )
        self.mode_settle_delay: float = float(
            os.environ.get("CALO_MODE_SETTLE_DELAY") or "0.5"
        )
        self.scroll_settle_delay: float = float(
            os.environ.get("CALO_SCROLL_SETTLE_DELAY") or "0.6"
        )
        self.hint_settle_delay: float = float(
            os.environ.get("CALO_HINT_SETTLE_DELAY") or "0.1"
        )
        self.frame_interval: float = float(os.environ.get("CALO_FRAME_INTERVAL") or "1.5")

        cors = os.environ.get("CALO_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
