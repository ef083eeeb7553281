"""
PostgreSQL repository adapter — certificate record persistence.

Adapter layer — implements the CertificateRepository port using psycopg (v3)
for sync PostgreSQL access with parameterized queries.

One table, one row per stored lookup:

  certificates(id BIGSERIAL, url, subject, issuer, valid_from, valid_to)

Every call opens its own connection and commits on exit; there is no
shared connection state between calls.

No ORM — raw parameterized SQL for maximum control and transparency.
"""

from __future__ import annotations

from typing import Any

import psycopg
import structlog
from railway import ErrorCode
from railway.result import Result

from cert_tracker.domain.models import CertificateRecord

log = structlog.get_logger()

DDL = """
CREATE TABLE IF NOT EXISTS certificates (
    id          BIGSERIAL PRIMARY KEY,
    url         TEXT NOT NULL,
    subject     TEXT,
    issuer      TEXT,
    valid_from  TIMESTAMP WITH TIME ZONE,
    valid_to    TIMESTAMP WITH TIME ZONE
)
"""

_INSERT = """
INSERT INTO certificates (url, subject, issuer, valid_from, valid_to)
VALUES (%s, %s, %s, %s, %s)
RETURNING id
"""

_SELECT_ALL = """
SELECT id, url, subject, issuer, valid_from, valid_to
FROM certificates
ORDER BY id
"""

_EXISTS = "SELECT EXISTS (SELECT 1 FROM certificates WHERE id = %s)"

_DELETE = "DELETE FROM certificates WHERE id = %s"


class PsycopgCertificateRepository:
    """
    Persist certificate records to PostgreSQL.

    Implements the CertificateRepository port.
    All exceptions are caught at this adapter boundary via Result.from_computation().
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def create_schema(self) -> None:
        """Create the certificates table if it does not exist. Raises on failure."""
        with psycopg.connect(self._dsn) as conn:
            conn.execute(DDL)
        log.info("repository.schema_ready")

    def save(self, record: CertificateRecord) -> Result[CertificateRecord]:
        """Insert a transient record and return it with the generated id."""
        return Result.from_computation(
            lambda: self._insert(record),
            ErrorCode.DATABASE_ERROR,
            "Failed to save certificate to database",
        )

    def find_all(self) -> Result[list[CertificateRecord]]:
        return Result.from_computation(
            self._select_all,
            ErrorCode.DATABASE_ERROR,
            "Failed to load certificates from database",
        )

    def exists_by_id(self, record_id: int) -> Result[bool]:
        return Result.from_computation(
            lambda: self._exists(record_id),
            ErrorCode.DATABASE_ERROR,
            "Failed to look up certificate in database",
        )

    def delete_by_id(self, record_id: int) -> Result[int]:
        return Result.from_computation(
            lambda: self._delete(record_id),
            ErrorCode.DATABASE_ERROR,
            "Failed to delete certificate from database",
        )

    def _insert(self, record: CertificateRecord) -> CertificateRecord:
        with psycopg.connect(self._dsn) as conn, conn.cursor() as cur:
            cur.execute(
                _INSERT,
                (
                    record.url,
                    record.subject,
                    record.issuer,
                    record.valid_from,
                    record.valid_to,
                ),
            )
            row = cur.fetchone()
            if row is None:
                raise RuntimeError("INSERT ... RETURNING id produced no row")
            saved = record.with_id(row[0])
            log.info("repository.saved", id=saved.id, url=saved.url)
            return saved

    def _select_all(self) -> list[CertificateRecord]:
        with psycopg.connect(self._dsn) as conn, conn.cursor() as cur:
            cur.execute(_SELECT_ALL)
            records = [_row_to_record(row) for row in cur.fetchall()]
            log.debug("repository.loaded", count=len(records))
            return records

    def _exists(self, record_id: int) -> bool:
        with psycopg.connect(self._dsn) as conn:
            row = conn.execute(_EXISTS, (record_id,)).fetchone()
            return bool(row and row[0])

    def _delete(self, record_id: int) -> int:
        with psycopg.connect(self._dsn) as conn:
            conn.execute(_DELETE, (record_id,))
            log.info("repository.deleted", id=record_id)
            return record_id


def _row_to_record(row: tuple[Any, ...]) -> CertificateRecord:
    record_id, url, subject, issuer, valid_from, valid_to = row
    return CertificateRecord(
        id=record_id,
        url=url,
        subject=subject,
        issuer=issuer,
        valid_from=valid_from,
        valid_to=valid_to,
    )
