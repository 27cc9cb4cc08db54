"""Testes dos helpers PKCE e da URL de consentimento."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from app.infra.calendar.pkce import (
    build_authorization_url,
    code_challenge_s256,
    generate_code_verifier,
)
from config.settings.calendar import CalendarOAuthSettings


class TestCodeVerifier:
    def test_length_is_within_rfc_limits(self) -> None:
        verifier = generate_code_verifier()

        assert 43 <= len(verifier) <= 128

    def test_verifiers_are_unique(self) -> None:
        assert generate_code_verifier() != generate_code_verifier()


class TestCodeChallenge:
    def test_matches_rfc_7636_example(self) -> None:
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"

        assert code_challenge_s256(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_has_no_padding(self) -> None:
        assert "=" not in code_challenge_s256(generate_code_verifier())


class TestAuthorizationUrl:
    def test_requests_offline_access_with_s256(self) -> None:
        settings = CalendarOAuthSettings(google_client_id="client-123")

        url = build_authorization_url(
            settings,
            redirect_uri="https://app.test/cb",
            code_challenge="challenge-1",
            state="user-1",
        )

        parts = urlsplit(url)
        query = {key: values[0] for key, values in parse_qs(parts.query).items()}
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == settings.google_auth_endpoint
        assert query["client_id"] == "client-123"
        assert query["redirect_uri"] == "https://app.test/cb"
        assert query["response_type"] == "code"
        assert query["access_type"] == "offline"
        assert query["prompt"] == "consent"
        assert query["code_challenge"] == "challenge-1"
        assert query["code_challenge_method"] == "S256"
        assert query["state"] == "user-1"
        assert query["scope"] == "https://www.googleapis.com/auth/calendar.readonly"

    def test_state_is_optional(self) -> None:
        url = build_authorization_url(
            CalendarOAuthSettings(google_client_id="c"),
            redirect_uri="https://app.test/cb",
            code_challenge="x",
        )

        assert "state=" not in url
