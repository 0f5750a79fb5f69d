"""PostgreSQL session-level advisory locks.

The lock belongs to the database session that took it, so acquisition and
release run on the same pooled connection.
"""

import zlib
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from pickup.locks.port import AdvisoryLocks
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

# Keys already in use by deployed jobs
WELL_KNOWN_KEYS = {"thank-completed": 922338}


def lock_key(name: str) -> int:
    return WELL_KNOWN_KEYS.get(name) or zlib.crc32(name.encode("utf-8"))


class PostgresAdvisoryLocks(AdvisoryLocks):
    def __init__(self, engine: Engine | str) -> None:
        self.engine = create_engine(engine) if isinstance(engine, str) else engine

    @contextmanager
    def hold(self, name: str):
        key = lock_key(name)
        with self.engine.connect() as connection:
            acquired = bool(connection.execute(text("SELECT pg_try_advisory_lock(:key)"), {"key": key}).scalar())
            connection.commit()
            logger.debug("advisory_lock_try", name=name, key=key, acquired=acquired)
            try:
                yield acquired
            finally:
                if acquired:
                    connection.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": key})
                    connection.commit()
