"""Parsing determinístico de dias e horários de itens de agenda.

Entradas vêm de extração por IA ou do provedor de calendário e não são
confiáveis. Cada função retorna None quando não consegue interpretar,
sem adivinhar (ex: "10" sem AM/PM é ambíguo).
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from app.domain.schedule import WEEKDAYS

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

_CLOCK_PATTERN = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?::(?P<second>\d{2}))?"
    r"\s*(?P<meridiem>[ap])?\.?\s*(?:m\.?)?$",
    re.IGNORECASE,
)
_RANGE_SEPARATOR = re.compile(r"\s*[-–—]\s*|\s+to\s+", re.IGNORECASE)

_DAY_ALIASES: dict[str, str] = {
    "tues": "Tuesday",
    "weds": "Wednesday",
    "thur": "Thursday",
    "thurs": "Thursday",
}
_DAY_LOOKUP: dict[str, str] = {
    **{name.casefold(): name for name in WEEKDAYS},
    **{name[:3].casefold(): name for name in WEEKDAYS},
    **_DAY_ALIASES,
}


def parse_day(value: str | None) -> tuple[str, date | None] | None:
    """Dia da semana canônico e, para datas ISO, a data específica."""
    if not value or not value.strip():
        return None
    key = value.strip().casefold().rstrip(".")
    if key in _DAY_LOOKUP:
        return _DAY_LOOKUP[key], None
    try:
        specific = date.fromisoformat(value.strip())
    except ValueError:
        return None
    return WEEKDAYS[specific.weekday()], specific


def parse_clock(value: str | None, zone: ZoneInfo) -> tuple[time, date | None] | None:
    """Horário de parede; datetimes ISO também devolvem a data local."""
    if not value or not value.strip():
        return None
    text = value.strip()

    match = _CLOCK_PATTERN.match(text)
    if match is None:
        return _parse_iso_datetime(text, zone)

    hour = int(match.group("hour"))
    minute = match.group("minute")
    second = match.group("second")
    meridiem = match.group("meridiem")
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower() == "p" else 0)
    elif minute is None:
        return None

    minute_value = int(minute or 0)
    second_value = int(second or 0)
    if hour > 23 or minute_value > 59 or second_value > 59:
        return None
    return time(hour, minute_value, second_value), None


def split_time_range(value: str | None) -> tuple[str, str] | None:
    """Divide '10:00 AM - 12:00 PM' em início e fim."""
    if not value or not value.strip():
        return None
    parts = _RANGE_SEPARATOR.split(value.strip(), maxsplit=1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


def parse_event_datetime(value: object, zone: ZoneInfo) -> datetime | None:
    """Timestamp RFC3339 do provedor convertido para o fuso do usuário."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=zone) if parsed.tzinfo is None else parsed.astimezone(zone)


def _parse_iso_datetime(text: str, zone: ZoneInfo) -> tuple[time, date | None] | None:
    if "T" not in text and " " not in text:
        return None
    parsed = parse_event_datetime(text, zone)
    if parsed is None:
        return None
    return parsed.time().replace(tzinfo=None, microsecond=0), parsed.date()
