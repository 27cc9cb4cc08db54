"""Use cases de importação e sincronização de agenda."""

from app.use_cases.schedule.import_schedule import ScheduleImportService

__all__ = ["ScheduleImportService"]
