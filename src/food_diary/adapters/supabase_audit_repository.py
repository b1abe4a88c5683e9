"""Supabase repository for audit events."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from food_diary.adapters.supabase_support import execute
from food_diary.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Writes entry audit events to the ``audit_events`` table."""

    client: Client
    table_name: str = "audit_events"

    def create_event(  # noqa: PLR0913
        self,
        user_id: UUID,
        entity_type: str,
        entity_id: UUID,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Insert one audit row with before/after JSON snapshots."""
        query = self.client.table(self.table_name).insert(
            {
                "user_id": str(user_id),
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "event_type": event_type,
                "before_json": before,
                "after_json": after,
            }
        )
        execute(query, f"record {event_type} audit event")
