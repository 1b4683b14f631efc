"""Catalog of domains believed to host ATS job listings."""

import sqlite3
from datetime import datetime

from loguru import logger

from ats_crawler.exceptions import PersistenceError
from ats_crawler.schema import AtsHost, AtsType
from ats_crawler.storage.database import Database, to_db_time, utcnow
from ats_crawler.vendors import CORE_HOSTS, company_from_domain


class HostRegistry:
    """Hosts keyed by domain. Hosts are never deleted, only deactivated."""

    def __init__(self, db: Database):
        self._db = db

    def register(
        self,
        domain: str,
        ats_type: AtsType,
        company: str | None = None,
        discovered_at: datetime | None = None,
    ) -> AtsHost:
        """Insert a host or refresh an existing one.

        On conflict the vendor is overwritten and the host reactivated;
        company and discovered_at keep their original values.
        Raises:
            PersistenceError
        """
        domain = domain.strip().lower()
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    "INSERT INTO ats_hosts (company, domain, ats_type, is_active, discovered_at)"
                    " VALUES (?, ?, ?, 1, ?)"
                    " ON CONFLICT(domain) DO UPDATE SET"
                    " ats_type = excluded.ats_type, is_active = 1",
                    (
                        company or company_from_domain(domain),
                        domain,
                        str(ats_type),
                        to_db_time(discovered_at or utcnow()),
                    ),
                )
                row = conn.execute("SELECT * FROM ats_hosts WHERE domain = ?", (domain,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"could not register host {domain}: {e}") from e
        host = AtsHost.model_validate(dict(row))
        logger.debug(f"Registered ATS host: {host.domain} ({host.ats_type}, company: {host.company})")
        return host

    def seed_core_hosts(self) -> int:
        """Register the always-present vendor hosts. Returns how many were written."""
        seeded = 0
        for core in CORE_HOSTS:
            try:
                self.register(core.domain, core.ats_type, company=core.company)
                seeded += 1
            except PersistenceError as e:
                logger.error(f"Failed seeding core host {core.domain}: {e}")
        logger.info(f"Seeded {seeded}/{len(CORE_HOSTS)} core ATS hosts")
        return seeded

    def deactivate(self, domain: str) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "UPDATE ats_hosts SET is_active = 0 WHERE domain = ?", (domain.strip().lower(),)
            )
        return cursor.rowcount > 0

    def get(self, domain: str) -> AtsHost | None:
        row = self._db.connection.execute(
            "SELECT * FROM ats_hosts WHERE domain = ?", (domain.strip().lower(),)
        ).fetchone()
        return AtsHost.model_validate(dict(row)) if row else None

    def active_hosts(self) -> list[AtsHost]:
        """Active hosts in registry order (insertion order)."""
        rows = self._db.connection.execute(
            "SELECT * FROM ats_hosts WHERE is_active = 1 ORDER BY id"
        ).fetchall()
        return [AtsHost.model_validate(dict(r)) for r in rows]

    def all_hosts(self) -> list[AtsHost]:
        rows = self._db.connection.execute("SELECT * FROM ats_hosts ORDER BY id").fetchall()
        return [AtsHost.model_validate(dict(r)) for r in rows]

    def summary(self) -> dict[str, dict[str, int]]:
        """Host counts per vendor, split into active and inactive."""
        rows = self._db.connection.execute(
            "SELECT COALESCE(ats_type, 'Unknown') AS ats_type, is_active, COUNT(*) AS n"
            " FROM ats_hosts GROUP BY 1, 2 ORDER BY 1"
        ).fetchall()
        result: dict[str, dict[str, int]] = {}
        for r in rows:
            counts = result.setdefault(r["ats_type"], {"active": 0, "inactive": 0})
            counts["active" if r["is_active"] else "inactive"] += r["n"]
        return result

    def log_summary(self) -> None:
        summary = self.summary()
        if not summary:
            logger.info("No ATS hosts in registry")
            return
        logger.info("--- ATS hosts in registry ---")
        for ats_type, counts in summary.items():
            logger.info(f"  {ats_type}: {counts['active']} active, {counts['inactive']} inactive")
