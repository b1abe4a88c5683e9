"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import create_client

from food_diary.adapters.supabase_audit_repository import SupabaseAuditRepository
from food_diary.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from food_diary.config import Settings
from food_diary.services.audit import AuditService
from food_diary.services.controller import DiaryController
from food_diary.services.diary import DiaryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    diary_service: DiaryService
    audit_service: AuditService
    close_resources: Callable[[], Awaitable[None]]

    def create_controller(self, user_id: UUID) -> DiaryController:
        """Return a diary controller for one user session, positioned on today."""
        return DiaryController.for_today(
            self.diary_service, user_id, self.settings.timezone
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseFoodEntryRepository(
        supabase_client, table_name=resolved_settings.food_entries_table
    )
    audit_repository = SupabaseAuditRepository(
        supabase_client, table_name=resolved_settings.audit_events_table
    )
    audit_service = AuditService(audit_repository)
    diary_service = DiaryService(
        repository=entry_repository,
        audit_service=audit_service,
        max_range_days=resolved_settings.max_range_days,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        diary_service=diary_service,
        audit_service=audit_service,
        close_resources=close_resources,
    )
