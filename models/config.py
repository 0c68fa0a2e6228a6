"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_STORE = "vaxtrack.yaml"


@dataclass
class Settings:
    store_path: Path
    secret_key: str = "dev-secret-key-change-in-prod"
    reminder_days: int = 7
    due_soon_days: int = 7
    simulated_delay: float = 0.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            store_path=Path(env.get("VAXTRACK_STORE", DEFAULT_STORE)),
            secret_key=env.get("SECRET_KEY", cls.secret_key),
            reminder_days=int(env.get("VAXTRACK_REMINDER_DAYS", cls.reminder_days)),
            due_soon_days=int(env.get("VAXTRACK_DUE_SOON_DAYS", cls.due_soon_days)),
            simulated_delay=float(
                env.get("VAXTRACK_SIMULATED_DELAY", cls.simulated_delay)
            ),
            log_level=env.get("VAXTRACK_LOG_LEVEL", cls.log_level),
        )
