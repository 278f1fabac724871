"""
Add-on catalog service.

Admin CRUD for per-unit package add-ons. Catalog rows get UUID ids, so they
never collide with built-in add-on ids.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.models import PerUnitAddOnCreate, PerUnitAddOnUpdate, StoredPerUnitAddOn
from utils.timezone import now_utc
from utils.user_context import get_current_user_id

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {
    "label", "price_per_unit", "unit", "unit_step",
    "max_quantity", "is_active", "sort_order"
}


def _to_add_on(row: dict) -> StoredPerUnitAddOn:
    return StoredPerUnitAddOn.model_validate(
        {**row, "id": str(row["id"]), "package_id": str(row["package_id"])}
    )


class AddOnService:
    """Service for per-unit add-on operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, package_id: str, data: PerUnitAddOnCreate) -> StoredPerUnitAddOn:
        """
        Add a per-unit add-on to a package.

        Raises:
            ValueError: If the package is not found
        """
        get_current_user_id()

        package = self.postgres.execute_single(
            "SELECT id FROM packages WHERE id = %s AND deleted_at IS NULL",
            (package_id,)
        )
        if package is None:
            raise ValueError(f"Package {package_id} not found")

        now = now_utc()
        row = self.postgres.execute_returning(
            """
            INSERT INTO package_add_ons (
                id, package_id, label, price_per_unit, unit, unit_step,
                max_quantity, is_active, sort_order, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s,
                %s, %s, %s, %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), package_id, data.label, data.price_per_unit, data.unit, data.unit_step,
                data.max_quantity, data.is_active, data.sort_order, now, now
            )
        )[0]

        add_on = _to_add_on(row)

        self.audit.log_change(
            entity_type="package_add_on",
            entity_id=UUID(add_on.id),
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )

        return add_on

    def get_by_id(self, add_on_id: UUID) -> StoredPerUnitAddOn | None:
        """Add-on if found and not deleted, None otherwise."""
        row = self.postgres.execute_single(
            "SELECT * FROM package_add_ons WHERE id = %s AND deleted_at IS NULL",
            (add_on_id,)
        )

        if row is None:
            return None

        return _to_add_on(row)

    def update(self, add_on_id: UUID, data: PerUnitAddOnUpdate) -> StoredPerUnitAddOn:
        """
        Update add-on fields.

        Raises:
            ValueError: If the add-on is not found or the new cap is below one step
        """
        get_current_user_id()

        current = self.get_by_id(add_on_id)
        if current is None:
            raise ValueError(f"Add-on {add_on_id} not found")

        updates = data.model_dump(exclude_none=True)
        for field in updates:
            if field not in _UPDATABLE_COLUMNS:
                logger.warning(
                    f"Attempted to update unknown field '{field}' on add-on {add_on_id}"
                )

        valid_updates = {k: v for k, v in updates.items() if k in _UPDATABLE_COLUMNS}
        if not valid_updates:
            return current

        step = valid_updates.get("unit_step", current.unit_step)
        cap = valid_updates.get("max_quantity", current.max_quantity)
        if cap is not None and 0 < cap < step:
            raise ValueError("max_quantity must be at least one unit_step")

        set_parts = []
        params = []
        for field, value in valid_updates.items():
            set_parts.append(f"{field} = %s")
            params.append(value)

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(add_on_id)

        row = self.postgres.execute_returning(
            f"""
            UPDATE package_add_ons
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING *
            """,
            tuple(params)
        )[0]

        updated = _to_add_on(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="package_add_on",
                entity_id=add_on_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def delete(self, add_on_id: UUID) -> bool:
        """
        Soft delete an add-on.

        Returns:
            True if deleted, False if not found
        """
        get_current_user_id()

        current = self.get_by_id(add_on_id)
        if current is None:
            return False

        now = now_utc()
        self.postgres.execute_returning(
            """
            UPDATE package_add_ons
            SET deleted_at = %s, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, now, add_on_id)
        )

        self.audit.log_change(
            entity_type="package_add_on",
            entity_id=add_on_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return True
