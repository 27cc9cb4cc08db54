"""Testes do endpoint /schedule/import-extracted."""

from __future__ import annotations

from fastapi.testclient import TestClient

from app.app import create_app
from tests.api.routes.route_support import build_resources
from tests.fakes.fake_schedule_repository import FakeScheduleRepository
from utils.errors import PersistenceError, PersistenceErrorKind

ITEMS = [
    {"title": "CS101", "day": "Mon", "startTime": "10:00", "endTime": "09:00"},
    {"title": "MATH200", "day": "Tue", "startTime": "9:00 AM", "endTime": "10:15 AM", "location": "Room TBD"},
]


class TestImportExtractedRoute:
    def test_reports_created_and_invalid_items(self) -> None:
        repository = FakeScheduleRepository()
        client = TestClient(create_app(build_resources(repository=repository)))

        response = client.post("/schedule/import-extracted", json={"user_id": "user-1", "items": ITEMS})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert len(body["errors"]) == 1
        assert body["errors"][0]["code"] == "validation.unparsable_time"
        assert body["errors"][0]["stage"] == "normalize"
        (_, created) = repository.created[0]
        assert created.location is None

    def test_guest_user_is_used_when_configured(self) -> None:
        repository = FakeScheduleRepository()
        resources = build_resources(repository=repository, guest_user_id="guest")
        client = TestClient(create_app(resources))

        response = client.post("/schedule/import-extracted", json={"items": ITEMS[1:]})

        assert response.status_code == 200
        assert [owner for owner, _ in repository.created] == ["guest"]

    def test_missing_user_without_guest_is_400(self) -> None:
        client = TestClient(create_app(build_resources()))

        response = client.post("/schedule/import-extracted", json={"items": ITEMS})

        assert response.status_code == 400
        assert response.json()["detail"] == "user_id_required"

    def test_commit_failure_is_reported_in_result(self) -> None:
        repository = FakeScheduleRepository(
            failures={1: PersistenceError(PersistenceErrorKind.TRANSIENT, "unavailable")}
        )
        client = TestClient(create_app(build_resources(repository=repository)))

        response = client.post("/schedule/import-extracted", json={"user_id": "user-1", "items": ITEMS})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 0
        assert [error["stage"] for error in body["errors"]] == ["normalize", "commit"]
        assert body["errors"][1]["retryable"] is True

    def test_listing_failure_maps_to_503(self) -> None:
        class _BrokenRepository(FakeScheduleRepository):
            async def list_schedule_entities(self, user_id, window=None):  # type: ignore[override]
                raise PersistenceError(PersistenceErrorKind.TRANSIENT, "unavailable")

        client = TestClient(create_app(build_resources(repository=_BrokenRepository())))

        response = client.post("/schedule/import-extracted", json={"user_id": "user-1", "items": ITEMS})

        assert response.status_code == 503
        assert response.json()["code"] == "persistence.transient"
