"""Testes do ScheduleNormalizer (itens de imagem e eventos de calendário)."""

from __future__ import annotations

from datetime import date, time

import pytest

from app.domain.schedule import ExtractedScheduleItem, SourceKind
from app.services.schedule_normalizer import (
    UNTITLED_EVENT,
    ScheduleNormalizer,
    clean_location,
    normalize,
)
from tests.fakes.calendar_events import all_day_event, calendar_event


class TestExtractedItems:
    """Itens extraídos de imagem."""

    def test_valid_item_is_normalized(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [
                {
                    "title": "CS101",
                    "day": "Mon",
                    "startTime": "10:00",
                    "endTime": "11:30",
                    "location": "Hall B",
                    "type": "Lecture",
                    "color": "#ff0000",
                }
            ],
        )

        assert result.errors == ()
        (item,) = result.items
        assert item.title == "CS101"
        assert item.day == "Monday"
        assert item.start_time == time(10, 0)
        assert item.end_time == time(11, 30)
        assert item.location == "Hall B"
        assert item.item_type == "lecture"
        assert item.color == "#ff0000"
        assert item.source_kind is SourceKind.IMAGE
        assert item.external_id is None

    def test_end_before_start_is_dropped_with_one_validation_error(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "CS101", "day": "Mon", "startTime": "10:00", "endTime": "09:00"}],
        )

        assert result.items == ()
        assert len(result.errors) == 1
        issue = result.errors[0]
        assert issue.stage == "normalize"
        assert issue.code == "validation.unparsable_time"
        assert issue.retryable is False
        assert "CS101" in issue.item

    def test_equal_start_and_end_is_rejected(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "Lab", "day": "Tue", "startTime": "14:00", "endTime": "2:00 PM"}],
        )

        assert result.items == ()
        assert result.errors[0].code == "validation.unparsable_time"

    def test_missing_title_reports_missing_field(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "   ", "day": "Mon", "startTime": "10:00", "endTime": "11:00"}],
        )

        assert result.items == ()
        assert result.errors[0].code == "validation.missing_field"

    def test_unparsable_time_reports_error(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "Bio", "day": "Wed", "startTime": "soon", "endTime": "11:00"}],
        )

        assert result.items == ()
        assert result.errors[0].code == "validation.unparsable_time"

    def test_legacy_extraction_shape_with_time_range(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"day": "Thursday", "name": "Physics", "place": "Lab 3", "time": "10:00 AM - 12:00 PM"}],
        )

        (item,) = result.items
        assert item.title == "Physics"
        assert item.day == "Thursday"
        assert item.start_time == time(10, 0)
        assert item.end_time == time(12, 0)
        assert item.location == "Lab 3"

    def test_iso_date_day_keeps_specific_date(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "Midterm", "day": "2026-10-21", "startTime": "9 AM", "endTime": "11 AM"}],
        )

        (item,) = result.items
        assert item.day == "Wednesday"
        assert item.event_date == date(2026, 10, 21)

    def test_unknown_day_reports_missing_field(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "Art", "day": "Someday", "startTime": "9:00", "endTime": "10:00"}],
        )

        assert result.items == ()
        assert result.errors[0].code == "validation.missing_field"

    def test_one_bad_item_does_not_abort_batch(self) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [
                {"title": "A", "day": "Mon", "startTime": "08:00", "endTime": "09:00"},
                {"title": "B", "day": "Mon", "startTime": "bad", "endTime": "09:00"},
                {"title": "C", "day": "Fri", "startTime": "13:00", "endTime": "14:00"},
            ],
        )

        assert [item.title for item in result.items] == ["A", "C"]
        assert len(result.errors) == 1
        assert result.errors[0].item.startswith("image#1")

    def test_accepts_model_instances(self) -> None:
        extracted = ExtractedScheduleItem(
            title="Chem", day="sat", start_time="1:00 PM", end_time="2:15 PM"
        )

        (item,) = normalize(SourceKind.IMAGE, [extracted]).items

        assert item.day == "Saturday"
        assert item.end_time == time(14, 15)


class TestLocationScrubbing:
    """Placeholder 'room tbd' vira local ausente."""

    @pytest.mark.parametrize("value", ["Room TBD", "room tbd", "ROOM TBD (check portal)"])
    def test_placeholder_becomes_absent(self, value: str) -> None:
        result = normalize(
            SourceKind.IMAGE,
            [{"title": "CS101", "day": "Mon", "startTime": "10:00", "endTime": "11:00", "location": value}],
        )

        assert result.items[0].location is None

    def test_clean_location_keeps_real_values(self) -> None:
        assert clean_location("  Hall A ") == "Hall A"
        assert clean_location("") is None
        assert clean_location(None) is None


class TestCalendarEvents:
    """Eventos vindos da Calendar API."""

    def test_event_is_converted_to_user_timezone(self) -> None:
        normalizer = ScheduleNormalizer("America/Sao_Paulo")

        result = normalizer.normalize(
            SourceKind.CALENDAR,
            [calendar_event("evt-1", start="2026-10-19T13:00:00Z", end="2026-10-19T14:30:00Z")],
        )

        (item,) = result.items
        assert item.day == "Monday"
        assert item.start_time == time(10, 0)
        assert item.end_time == time(11, 30)
        assert item.external_id == "evt-1"
        assert item.event_date == date(2026, 10, 19)
        assert item.source_kind is SourceKind.CALENDAR

    def test_missing_summary_falls_back_to_untitled(self) -> None:
        (item,) = normalize(SourceKind.CALENDAR, [calendar_event("evt-2", summary=None)]).items

        assert item.title == UNTITLED_EVENT

    def test_all_day_event_reports_missing_start_datetime(self) -> None:
        result = normalize(SourceKind.CALENDAR, [all_day_event("evt-3")])

        assert result.items == ()
        assert result.errors[0].code == "validation.missing_field"
        assert result.errors[0].item == "calendar:evt-3"

    def test_event_crossing_local_midnight_is_rejected(self) -> None:
        result = normalize(
            SourceKind.CALENDAR,
            [calendar_event("evt-4", start="2026-10-19T23:00:00Z", end="2026-10-20T01:00:00Z")],
        )

        assert result.items == ()
        assert result.errors[0].code == "validation.unparsable_time"

    def test_recurring_instances_collapse_into_series(self) -> None:
        events = [
            calendar_event("series-1_20261019", recurring_event_id="series-1"),
            calendar_event(
                "series-1_20261026",
                start="2026-10-26T10:00:00Z",
                end="2026-10-26T11:30:00Z",
                recurring_event_id="series-1",
            ),
        ]

        result = normalize(SourceKind.CALENDAR, events)

        (item,) = result.items
        assert item.external_id == "series-1"
        assert item.event_date is None
        assert result.errors == ()

    def test_room_tbd_location_is_scrubbed(self) -> None:
        (item,) = normalize(
            SourceKind.CALENDAR, [calendar_event("evt-5", location="Room TBD")]
        ).items

        assert item.location is None


class TestDeterminism:
    """Mesma entrada gera saída idêntica."""

    def test_identical_input_gives_equal_output(self) -> None:
        raw = [
            {"title": "CS101", "day": "Mon", "startTime": "10:00", "endTime": "11:00"},
            {"title": "Bad", "day": "Mon", "startTime": "10:00", "endTime": "09:00"},
        ]
        events = [calendar_event("evt-1"), calendar_event("evt-2", summary="Lab")]

        assert normalize(SourceKind.IMAGE, raw) == normalize(SourceKind.IMAGE, raw)
        assert normalize(SourceKind.CALENDAR, events) == normalize(SourceKind.CALENDAR, events)

    def test_ids_are_stable_and_prefixed(self) -> None:
        raw = [{"title": "CS101", "day": "Mon", "startTime": "10:00", "endTime": "11:00"}]

        first = normalize(SourceKind.IMAGE, raw).items[0].id
        second = normalize(SourceKind.IMAGE, raw).items[0].id

        assert first == second
        assert first.startswith("image-0-")
