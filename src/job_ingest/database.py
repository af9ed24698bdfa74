"""
Database module for company/job storage and key-based deduplication

Companies are unique on name, jobs on (source_type, source_key). Every write
is an atomic upsert inside its own IMMEDIATE transaction, so overlapping runs
can repeat work but never create a second row for the same key.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from job_ingest.models import Company, Job

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ("website", "ats_provider", "career_page_url")
JOB_CREATE_FIELDS = (
    "ats_type",
    "title",
    "description",
    "location",
    "remote",
    "apply_url",
    "company_id",
    "posted_at",
)
JOB_UPDATE_FIELDS = ("title", "description", "location", "remote", "posted_at")


class JobStore:
    """Manages the SQLite store for companies, jobs and saved jobs"""

    def __init__(self, db_path: str = "data/jobs.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.init_database()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements in one IMMEDIATE transaction (write lock taken up front)"""
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def init_database(self):
        """Create database schema if it doesn't exist"""
        conn = self._connect()
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS companies (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT UNIQUE NOT NULL,
                    website TEXT,
                    ats_provider TEXT,
                    career_page_url TEXT,
                    last_crawled_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS jobs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source_type TEXT NOT NULL,
                    source_key TEXT NOT NULL,
                    ats_type TEXT NOT NULL DEFAULT 'unknown',
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    location TEXT,
                    remote INTEGER NOT NULL DEFAULT 0,
                    apply_url TEXT NOT NULL,
                    company_id INTEGER NOT NULL REFERENCES companies(id),
                    posted_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(source_type, source_key)
                );

                CREATE TABLE IF NOT EXISTS saved_jobs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    job_id INTEGER NOT NULL REFERENCES jobs(id),
                    created_at TEXT NOT NULL,
                    UNIQUE(user_id, job_id)
                );

                CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_id);
                CREATE INDEX IF NOT EXISTS idx_companies_ats ON companies(ats_provider);
            """)
        finally:
            conn.close()

    # ==================== Companies ====================

    def upsert_company(self, name: str, **fields: Any) -> Company:
        """
        Get or create a company by exact name

        Args:
            name: Company name (exact-match identity)
            **fields: website / ats_provider / career_page_url, only used on create

        Returns:
            The existing or newly created Company. Existing rows are never modified.
        """
        unknown = set(fields) - set(COMPANY_FIELDS)
        if unknown:
            raise ValueError(f"Unknown company fields: {sorted(unknown)}")

        now = datetime.now().isoformat()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO companies (
                    name, website, ats_provider, career_page_url, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO NOTHING
            """,
                (
                    name,
                    fields.get("website"),
                    fields.get("ats_provider"),
                    fields.get("career_page_url"),
                    now,
                    now,
                ),
            )
            row = conn.execute("SELECT * FROM companies WHERE name = ?", (name,)).fetchone()

        return _company_from_row(row)

    def get_company(self, company_id: int) -> Company | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM companies WHERE id = ?", (company_id,)).fetchone()
        finally:
            conn.close()
        return _company_from_row(row) if row else None

    def get_company_by_name(self, name: str) -> Company | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM companies WHERE name = ?", (name,)).fetchone()
        finally:
            conn.close()
        return _company_from_row(row) if row else None

    def list_crawlable_companies(self) -> list[Company]:
        """Companies with both an ATS provider and a career page URL, by name"""
        conn = self._connect()
        try:
            rows = conn.execute("""
                SELECT * FROM companies
                WHERE ats_provider IS NOT NULL AND ats_provider != ''
                  AND career_page_url IS NOT NULL AND career_page_url != ''
                ORDER BY name
            """).fetchall()
        finally:
            conn.close()
        return [_company_from_row(row) for row in rows]

    def touch_company_crawled_at(self, company_id: int) -> None:
        """Advance a company's last-crawl timestamp to now"""
        now = datetime.now().isoformat()
        with self._transaction() as conn:
            conn.execute(
                """
                UPDATE companies
                SET last_crawled_at = ?, updated_at = ?
                WHERE id = ?
            """,
                (now, now, company_id),
            )

    # ==================== Jobs ====================

    def upsert_job(
        self,
        source_type: str,
        source_key: str,
        create_fields: dict[str, Any],
        update_fields: dict[str, Any],
    ) -> tuple[Job, bool]:
        """
        Insert a job or refresh the mutable fields of the existing row

        Args:
            source_type: First half of the identity key
            source_key: Second half of the identity key
            create_fields: Columns written when the row is new
            update_fields: Columns refreshed when the row already exists

        Returns:
            Tuple of (Job, created)
        """
        bad_create = set(create_fields) - set(JOB_CREATE_FIELDS)
        bad_update = set(update_fields) - set(JOB_UPDATE_FIELDS)
        if bad_create or bad_update:
            raise ValueError(
                f"Unknown job fields: create={sorted(bad_create)} update={sorted(bad_update)}"
            )

        now = datetime.now().isoformat()
        create = {**create_fields}
        if "remote" in create:
            create["remote"] = int(bool(create["remote"]))
        update = {**update_fields}
        if "remote" in update:
            update["remote"] = int(bool(update["remote"]))

        columns = ["source_type", "source_key", *create.keys(), "created_at", "updated_at"]
        values = [source_type, source_key, *create.values(), now, now]
        placeholders = ", ".join("?" for _ in columns)

        with self._transaction() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO jobs ({", ".join(columns)}) VALUES ({placeholders})
                ON CONFLICT(source_type, source_key) DO NOTHING
            """,
                values,
            )
            created = cursor.rowcount == 1

            if not created and update:
                assignments = ", ".join(f"{column} = ?" for column in update)
                conn.execute(
                    f"""
                    UPDATE jobs SET {assignments}, updated_at = ?
                    WHERE source_type = ? AND source_key = ?
                """,
                    [*update.values(), now, source_type, source_key],
                )

            row = conn.execute(
                "SELECT * FROM jobs WHERE source_type = ? AND source_key = ?",
                (source_type, source_key),
            ).fetchone()

        return _job_from_row(row), created

    def get_job(self, job_id: int) -> Job | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        finally:
            conn.close()
        return _job_from_row(row) if row else None

    def get_job_by_key(self, source_type: str, source_key: str) -> Job | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT * FROM jobs WHERE source_type = ? AND source_key = ?",
                (source_type, source_key),
            ).fetchone()
        finally:
            conn.close()
        return _job_from_row(row) if row else None

    def get_jobs_for_company(self, company_id: int) -> list[Job]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT * FROM jobs WHERE company_id = ? ORDER BY id", (company_id,)
            ).fetchall()
        finally:
            conn.close()
        return [_job_from_row(row) for row in rows]

    def get_job_count(self) -> int:
        conn = self._connect()
        try:
            return conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0]
        finally:
            conn.close()

    def get_stats(self) -> dict:
        """Row counts per source type plus totals"""
        conn = self._connect()
        try:
            total_jobs = conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0]
            total_companies = conn.execute("SELECT COUNT(*) FROM companies").fetchone()[0]
            rows = conn.execute(
                "SELECT source_type, COUNT(*) FROM jobs GROUP BY source_type"
            ).fetchall()
        finally:
            conn.close()

        return {
            "total_jobs": total_jobs,
            "total_companies": total_companies,
            "jobs_by_source": {row[0]: row[1] for row in rows},
        }

    # ==================== Saved jobs ====================

    def save_job_for_user(self, user_id: str, job_id: int) -> bool:
        """Add a job to a user's saved list. Returns False if it was already saved."""
        now = datetime.now().isoformat()
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO saved_jobs (user_id, job_id, created_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id, job_id) DO NOTHING
            """,
                (user_id, job_id, now),
            )
            return cursor.rowcount == 1

    def get_saved_job_ids(self, user_id: str) -> list[int]:
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT job_id FROM saved_jobs WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
        finally:
            conn.close()
        return [row[0] for row in rows]


def _company_from_row(row: sqlite3.Row) -> Company:
    return Company(
        id=row["id"],
        name=row["name"],
        website=row["website"],
        ats_provider=row["ats_provider"],
        career_page_url=row["career_page_url"],
        last_crawled_at=row["last_crawled_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _job_from_row(row: sqlite3.Row) -> Job:
    return Job(
        id=row["id"],
        source_type=row["source_type"],
        source_key=row["source_key"],
        ats_type=row["ats_type"],
        title=row["title"],
        description=row["description"],
        location=row["location"],
        remote=bool(row["remote"]),
        apply_url=row["apply_url"],
        company_id=row["company_id"],
        posted_at=row["posted_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
