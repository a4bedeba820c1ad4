"""Platform-owned announcement delay service."""

import logging
import math
import random
import sqlite3
from pathlib import Path
from typing import Optional

from audition_platform.errors import DelayNotConfigured
from audition_platform.models import DelayConfig
from audition_platform.persistence import DelayStore, connect, transaction

logger = logging.getLogger(__name__)


def random_delay_ms(conn: sqlite3.Connection, rng: Optional[random.Random] = None) -> int:
    """Draw an announcement delay: ``floor(baseline + U[0, 1) * range)``.

    Reads the configuration at call time. Raises ``DelayNotConfigured`` when
    no delay has been stored.
    """
    config = DelayStore.get(conn)
    if config is None:
        raise DelayNotConfigured("Announcement delay has not been configured")
    draw = (rng or random).random()
    return math.floor(config["baseline"] + draw * config["range"])


def get_delay_config(db_path: Path) -> Optional[DelayConfig]:
    """Return the stored delay window, or None."""
    with connect(db_path) as conn:
        config = DelayStore.get(conn)
    if config is None:
        return None
    return DelayConfig(baseline=config["baseline"], range=config["range"])


def set_delay_config(db_path: Path, baseline: float, range_: float) -> DelayConfig:
    """Create or replace the delay window (admin operation)."""
    if not (math.isfinite(baseline) and math.isfinite(range_)):
        raise ValueError("Delay baseline and range must be finite numbers")
    if baseline < 0 or range_ < 0:
        raise ValueError("Delay baseline and range must be non-negative")

    with connect(db_path) as conn, transaction(conn):
        updated = DelayStore.upsert(conn, baseline, range_)

    if updated:
        logger.info("Delay exists. Updated it to baseline=%sms range=%sms", baseline, range_)
    else:
        logger.info("Configured delay baseline=%sms range=%sms", baseline, range_)
    return DelayConfig(baseline=baseline, range=range_)
