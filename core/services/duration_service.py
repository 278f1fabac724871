"""
Duration discount service.

Admin CRUD for the per-package duration discount table. Every change is
audited because it changes what customers are charged.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.models import (
    DurationDiscountRowCreate, DurationDiscountRowUpdate, StoredDurationDiscountRow,
)
from utils.timezone import now_utc
from utils.user_context import get_current_user_id

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {"duration_months", "discount_percent", "is_active"}


def _to_row(row: dict) -> StoredDurationDiscountRow:
    return StoredDurationDiscountRow.model_validate({**row, "package_id": str(row["package_id"])})


class DurationService:
    """Service for duration discount row operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def _ensure_package(self, package_id: str) -> None:
        package = self.postgres.execute_single(
            "SELECT id FROM packages WHERE id = %s AND deleted_at IS NULL",
            (package_id,)
        )
        if package is None:
            raise ValueError(f"Package {package_id} not found")

    def _ensure_unique_active(
        self,
        package_id: str,
        duration_months: int,
        exclude_id: UUID | None = None
    ) -> None:
        existing = self.postgres.execute_single(
            """
            SELECT id FROM package_durations
            WHERE package_id = %s AND duration_months = %s
              AND is_active = true AND deleted_at IS NULL
              AND (%s::uuid IS NULL OR id <> %s::uuid)
            """,
            (package_id, duration_months, exclude_id, exclude_id)
        )
        if existing is not None:
            raise ValueError(
                f"Package {package_id} already has an active {duration_months}-month discount"
            )

    def create(self, package_id: str, data: DurationDiscountRowCreate) -> StoredDurationDiscountRow:
        """
        Add a duration discount row to a package.

        Args:
            package_id: Package the row belongs to
            data: Row data

        Returns:
            Created row

        Raises:
            ValueError: If the package is not found or an active row for the
                same duration already exists
        """
        get_current_user_id()
        self._ensure_package(package_id)
        if data.is_active:
            self._ensure_unique_active(package_id, data.duration_months)

        now = now_utc()
        row = self.postgres.execute_returning(
            """
            INSERT INTO package_durations (
                id, package_id, duration_months, discount_percent, is_active,
                created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s,
                %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), package_id, data.duration_months, data.discount_percent, data.is_active,
                now, now
            )
        )[0]

        created = _to_row(row)

        self.audit.log_change(
            entity_type="package_duration",
            entity_id=created.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json")}
        )

        return created

    def get_by_id(self, row_id: UUID) -> StoredDurationDiscountRow | None:
        """
        Get a duration row by ID.

        Returns:
            Row if found and not deleted, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM package_durations WHERE id = %s AND deleted_at IS NULL",
            (row_id,)
        )

        if row is None:
            return None

        return _to_row(row)

    def update(self, row_id: UUID, data: DurationDiscountRowUpdate) -> StoredDurationDiscountRow:
        """
        Update a duration row.

        Raises:
            ValueError: If the row is not found or the change would create a
                second active row for the same duration
        """
        get_current_user_id()

        current = self.get_by_id(row_id)
        if current is None:
            raise ValueError(f"Duration row {row_id} not found")

        updates = data.model_dump(exclude_none=True)
        valid_updates = {k: v for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if not valid_updates:
            return current

        months = valid_updates.get("duration_months", current.duration_months)
        active = valid_updates.get("is_active", current.is_active)
        if active:
            self._ensure_unique_active(current.package_id, months, exclude_id=row_id)

        set_parts = []
        params = []
        for field, value in valid_updates.items():
            set_parts.append(f"{field} = %s")
            params.append(value)

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(row_id)

        row = self.postgres.execute_returning(
            f"""
            UPDATE package_durations
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING *
            """,
            tuple(params)
        )[0]

        updated = _to_row(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="package_duration",
                entity_id=row_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def delete(self, row_id: UUID) -> bool:
        """
        Soft delete a duration row.

        Returns:
            True if deleted, False if not found
        """
        get_current_user_id()

        current = self.get_by_id(row_id)
        if current is None:
            return False

        now = now_utc()
        self.postgres.execute_returning(
            """
            UPDATE package_durations
            SET deleted_at = %s, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, now, row_id)
        )

        self.audit.log_change(
            entity_type="package_duration",
            entity_id=row_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return True

    def list_for_package(self, package_id: str) -> list[StoredDurationDiscountRow]:
        """All non-deleted duration rows for a package, shortest first."""
        rows = self.postgres.execute(
            """
            SELECT * FROM package_durations
            WHERE package_id = %s AND deleted_at IS NULL
            ORDER BY duration_months ASC, updated_at ASC
            """,
            (package_id,)
        )

        return [_to_row(row) for row in rows]
