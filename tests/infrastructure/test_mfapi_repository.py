from decimal import Decimal

import pytest
import requests

from nav_analytics.domain.errors import ProviderError, SchemeNotFound
from nav_analytics.infrastructure.repositories.mfapi_repository import MfapiNavRepository


class FakeResponse:
    def __init__(self, status_code: int, payload=None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, float]] = []
        self._response = response
        self._error = error

    def get(self, url: str, timeout: float):
        self.calls.append((url, timeout))
        if self._error is not None:
            raise self._error
        return self._response


def make_repo(session: FakeSession) -> MfapiNavRepository:
    return MfapiNavRepository(base_url="https://example.test/mf/", timeout=3, session=session)


def test_get_scheme_parses_payload():
    session = FakeSession(
        FakeResponse(
            200,
            {
                "status": "SUCCESS",
                "meta": {"scheme_code": 100, "scheme_name": "Alpha Fund"},
                "data": [{"date": "01-01-2023", "nav": "10.5"}],
            },
        )
    )

    details = make_repo(session).get_scheme("100")

    assert session.calls == [("https://example.test/mf/100", 3)]
    assert session.headers["Accept"] == "application/json"
    assert details.meta.name == "Alpha Fund"
    assert details.series.latest.nav == Decimal("10.5")


def test_http_404_is_scheme_not_found():
    with pytest.raises(SchemeNotFound):
        make_repo(FakeSession(FakeResponse(404))).get_scheme("100")


def test_server_error_is_provider_error():
    with pytest.raises(ProviderError):
        make_repo(FakeSession(FakeResponse(503))).get_scheme("100")


def test_transport_failure_is_provider_error():
    session = FakeSession(error=requests.ConnectionError("boom"))
    with pytest.raises(ProviderError):
        make_repo(session).list_schemes()


def test_malformed_json_is_provider_error():
    with pytest.raises(ProviderError):
        make_repo(FakeSession(FakeResponse(200))).get_scheme("100")


def test_list_schemes():
    session = FakeSession(FakeResponse(200, [{"schemeCode": 100, "schemeName": "Alpha Fund"}]))
    schemes = make_repo(session).list_schemes()
    assert session.calls[0][0] == "https://example.test/mf"
    assert schemes[0].name == "Alpha Fund"
