"""Agregador de settings do serviço de sincronização de agenda.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    VALID_LOG_LEVELS,
    BaseSettings,
    Environment,
    get_base_settings,
)

# Calendar/OAuth settings
from config.settings.calendar import (
    CALENDAR_READONLY_SCOPE,
    GOOGLE_AUTH_ENDPOINT,
    GOOGLE_TOKEN_ENDPOINT,
    CalendarOAuthSettings,
    get_calendar_oauth_settings,
)

# Store settings
from config.settings.stores import (
    ScheduleRepositoryBackend,
    StoreSettings,
    TokenStoreBackend,
    get_store_settings,
)

__all__ = [
    # Constants
    "CALENDAR_READONLY_SCOPE",
    "GOOGLE_AUTH_ENDPOINT",
    "GOOGLE_TOKEN_ENDPOINT",
    "VALID_LOG_LEVELS",
    # Base
    "BaseSettings",
    "CalendarOAuthSettings",
    "Environment",
    "ScheduleRepositoryBackend",
    # Stores
    "StoreSettings",
    "TokenStoreBackend",
    "get_base_settings",
    "get_calendar_oauth_settings",
    "get_store_settings",
]
