"""AgentStore for agent records and the delegation ledger.

This module provides the AgentStore class which handles:
- Registering, updating and removing agents keyed by name
- Listing agents as a point-in-time snapshot
- Heartbeats that refresh an agent's last_seen timestamp
- Recording delegation attempts and their outcomes
- Accepting asynchronous results exactly once per delegation
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from agent_mesh.registry.types import (
    FINALIZED_STATUSES,
    AgentAuth,
    AgentDescriptor,
    AgentRegistration,
    DelegationConflictError,
    DelegationRecord,
    DelegationStatus,
    ResourceGrant,
)

logger = logging.getLogger(__name__)

_FINALIZED_SQL = ", ".join(f"'{s.value}'" for s in sorted(FINALIZED_STATUSES))

_SCHEMA = """
CREATE TABLE IF NOT EXISTS agents (
    name TEXT PRIMARY KEY,
    description TEXT NOT NULL,
    capabilities TEXT NOT NULL,
    resources TEXT NOT NULL DEFAULT '[]',
    endpoint TEXT NOT NULL,
    protocol TEXT NOT NULL DEFAULT 'http',
    auth TEXT,
    registered_at TEXT NOT NULL,
    last_seen TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS delegations (
    id TEXT PRIMARY KEY,
    source_agent TEXT NOT NULL,
    target_agent TEXT NOT NULL,
    task TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    result TEXT,
    error TEXT,
    latency_ms INTEGER,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AgentStore:
    """SQLite-backed store for agents and delegation records.

    Each operation opens its own connection, so a store can be shared by
    concurrent request handlers without extra locking.
    """

    def __init__(self, db_path: Path):
        """Initialize the AgentStore.

        Args:
            db_path: Path of the SQLite database file. Parent directories
                     are created if they don't exist.
        """
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(_SCHEMA)
        logger.debug(f"Agent store ready: {self.db_path}")

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # --- Agents ---

    def register(self, registration: AgentRegistration) -> AgentDescriptor:
        """Register a new agent or update an existing one.

        The original registered_at timestamp is kept on update; last_seen
        is always refreshed.

        Args:
            registration: Agent fields to store

        Returns:
            The stored AgentDescriptor

        Raises:
            ValueError: If name or endpoint is blank
        """
        if not registration.name or not registration.name.strip():
            raise ValueError("Agent name is required")
        if not registration.endpoint or not registration.endpoint.strip():
            raise ValueError("Agent endpoint is required")

        now = _now()
        auth = json.dumps(asdict(registration.auth)) if registration.auth else None

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO agents (
                    name, description, capabilities, resources, endpoint,
                    protocol, auth, registered_at, last_seen
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    description = excluded.description,
                    capabilities = excluded.capabilities,
                    resources = excluded.resources,
                    endpoint = excluded.endpoint,
                    protocol = excluded.protocol,
                    auth = excluded.auth,
                    last_seen = excluded.last_seen
                """,
                (
                    registration.name,
                    registration.description,
                    json.dumps(list(registration.capabilities)),
                    json.dumps([asdict(r) for r in registration.resources]),
                    registration.endpoint,
                    registration.protocol or "http",
                    auth,
                    now,
                    now,
                ),
            )
            row = conn.execute(
                "SELECT * FROM agents WHERE name = ?", (registration.name,)
            ).fetchone()

        logger.info(f"Registered agent {registration.name} at {registration.endpoint}")
        return self._row_to_agent(row)

    def unregister(self, name: str) -> bool:
        """Remove an agent. Returns False if it was not registered."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM agents WHERE name = ?", (name,))
            removed = cursor.rowcount > 0

        if removed:
            logger.info(f"Unregistered agent {name}")
        return removed

    def get(self, name: str) -> AgentDescriptor | None:
        """Get an agent by name."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM agents WHERE name = ?", (name,)).fetchone()
        return self._row_to_agent(row) if row else None

    def list(self) -> list[AgentDescriptor]:
        """List all agents ordered by name."""
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM agents ORDER BY name").fetchall()

        agents: list[AgentDescriptor] = []
        for row in rows:
            try:
                agents.append(self._row_to_agent(row))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed agent row {row['name']}: {e}")
        return agents

    def heartbeat(self, name: str) -> bool:
        """Refresh an agent's last_seen timestamp."""
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE agents SET last_seen = ? WHERE name = ?", (_now(), name)
            )
            return cursor.rowcount > 0

    # --- Delegation ledger ---

    def record(self, record: DelegationRecord) -> DelegationRecord:
        """Record a delegation attempt.

        Recording the same id twice keeps the first row.

        Args:
            record: The attempt to record

        Returns:
            The stored DelegationRecord
        """
        now = _now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR IGNORE INTO delegations (
                    id, source_agent, target_agent, task, status,
                    result, error, latency_ms, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.source_agent,
                    record.target_agent,
                    record.task,
                    DelegationStatus(record.status).value,
                    record.result,
                    record.error,
                    record.latency_ms,
                    now,
                    now,
                ),
            )
            row = conn.execute(
                "SELECT * FROM delegations WHERE id = ?", (record.id,)
            ).fetchone()

        return self._row_to_delegation(row)

    def update(
        self,
        delegation_id: str,
        status: DelegationStatus,
        result: str | None = None,
        error: str | None = None,
        latency_ms: int | None = None,
        keep_finalized: bool = False,
    ) -> bool:
        """Update a delegation's status. Omitted fields keep their values.

        With keep_finalized, a record already completed or failed keeps its
        status and result; only latency_ms is filled in.
        """
        status_expr = "?"
        result_expr = "COALESCE(?, result)"
        if keep_finalized:
            status_expr = f"CASE WHEN status IN ({_FINALIZED_SQL}) THEN status ELSE ? END"
            result_expr = (
                f"CASE WHEN status IN ({_FINALIZED_SQL}) THEN result "
                f"ELSE COALESCE(?, result) END"
            )

        sql = f"""
            UPDATE delegations SET
                status = {status_expr},
                result = {result_expr},
                error = COALESCE(?, error),
                latency_ms = COALESCE(?, latency_ms),
                updated_at = ?
            WHERE id = ?
        """
        params: tuple[Any, ...] = (
            DelegationStatus(status).value,
            result,
            error,
            latency_ms,
            _now(),
            delegation_id,
        )
        with self._connect() as conn:
            cursor = conn.execute(sql, params)
            return cursor.rowcount > 0

    def deliver_result(
        self,
        delegation_id: str,
        status: DelegationStatus,
        result: str | None = None,
        error: str | None = None,
    ) -> DelegationRecord | None:
        """Apply an asynchronous result delivered by the target agent.

        Args:
            delegation_id: The delegation the result belongs to
            status: Final status reported by the agent (completed or failed)
            result: Optional result text
            error: Optional error text

        Returns:
            The updated record, or None if the delegation is unknown

        Raises:
            DelegationConflictError: If the delegation is already finalized
        """
        with self._connect() as conn:
            cursor = conn.execute(
                f"""
                UPDATE delegations SET
                    status = ?,
                    result = COALESCE(?, result),
                    error = COALESCE(?, error),
                    updated_at = ?
                WHERE id = ? AND status NOT IN ({_FINALIZED_SQL})
                """,
                (
                    DelegationStatus(status).value,
                    result,
                    error,
                    _now(),
                    delegation_id,
                ),
            )
            applied = cursor.rowcount > 0

        record = self.get_delegation(delegation_id)
        if record is None:
            return None
        if not applied:
            raise DelegationConflictError(
                f"Delegation {delegation_id} already finalized as {record.status.value}"
            )

        logger.info(f"Delegation {delegation_id} finalized as {record.status.value}")
        return record

    def get_delegation(self, delegation_id: str) -> DelegationRecord | None:
        """Get a delegation record by id."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM delegations WHERE id = ?", (delegation_id,)
            ).fetchone()
        return self._row_to_delegation(row) if row else None

    def list_delegations(self, limit: int = 50, offset: int = 0) -> list[DelegationRecord]:
        """List delegation records, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM delegations ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [self._row_to_delegation(row) for row in rows]

    # --- Row conversion ---

    @staticmethod
    def _row_to_agent(row: Any) -> AgentDescriptor:
        auth = None
        if row["auth"]:
            auth = AgentAuth(**json.loads(row["auth"]))

        return AgentDescriptor(
            name=row["name"],
            description=row["description"],
            capabilities=json.loads(row["capabilities"]),
            resources=[ResourceGrant(**r) for r in json.loads(row["resources"] or "[]")],
            endpoint=row["endpoint"],
            protocol=row["protocol"],
            auth=auth,
            registered_at=row["registered_at"],
            last_seen=row["last_seen"],
        )

    @staticmethod
    def _row_to_delegation(row: Any) -> DelegationRecord:
        return DelegationRecord(
            id=row["id"],
            source_agent=row["source_agent"],
            target_agent=row["target_agent"],
            task=row["task"],
            status=DelegationStatus(row["status"]),
            result=row["result"],
            error=row["error"],
            latency_ms=row["latency_ms"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
