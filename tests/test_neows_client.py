import threading
from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
import requests

from neowatch.services.neows import NeoFetchError, NeoWsClient

from conftest import neows_payload


def make_client(json_body=None, status=200, exc=None):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if exc is not None:
        session.get.side_effect = exc
    else:
        resp = MagicMock()
        resp.status_code = status
        resp.json.return_value = json_body
        if status >= 400:
            resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
        session.get.return_value = resp
    return NeoWsClient(api_key="TEST_KEY", base_url="https://neo.test/rest/v1/", timeout=5, session_factory=lambda: session), session


def test_fetch_neo_parses_record():
    body = neows_payload("3542519", [("2024-01-11", "2024-Jan-11 04:20", 123456.789)], hazardous=True)
    client, session = make_client(body)

    neo = client.fetch_neo("3542519")

    session.get.assert_called_once_with(
        "https://neo.test/rest/v1/neo/3542519",
        params={"api_key": "TEST_KEY"},
        timeout=5,
    )
    assert neo.neo_id == "3542519"
    assert neo.is_potentially_hazardous
    [event] = neo.close_approach_data
    assert event.close_approach_date == date(2024, 1, 11)
    assert event.close_approach_datetime == datetime(2024, 1, 11, 4, 20)
    assert event.miss_distance_km == pytest.approx(123456.789)
    assert event.relative_velocity_km_s == pytest.approx(12.5)


def test_null_approach_data_becomes_empty():
    body = neows_payload("1", [])
    body["close_approach_data"] = None
    client, _ = make_client(body)

    assert client.fetch_neo("1").close_approach_data == []


def test_http_error_raises_fetch_error():
    client, _ = make_client({"error": "not found"}, status=404)

    with pytest.raises(NeoFetchError) as info:
        client.fetch_neo("404")
    assert info.value.neo_id == "404"


def test_network_error_raises_fetch_error():
    client, _ = make_client(exc=requests.ConnectionError("refused"))

    with pytest.raises(NeoFetchError):
        client.fetch_neo("1")


def test_malformed_payload_raises_fetch_error():
    body = neows_payload("1", [("not-a-date", None, 10)])
    client, _ = make_client(body)

    with pytest.raises(NeoFetchError):
        client.fetch_neo("1")


def test_non_object_payload_raises_fetch_error():
    client, _ = make_client(["unexpected"])

    with pytest.raises(NeoFetchError):
        client.fetch_neo("1")


def test_fetch_feed_ids_flattens_by_date():
    body = {
        "element_count": 3,
        "near_earth_objects": {
            "2024-01-12": [{"id": "30"}],
            "2024-01-11": [{"id": "10"}, {"neo_reference_id": "20"}],
        },
    }
    client, session = make_client(body)

    ids = client.fetch_feed_ids(date(2024, 1, 11), date(2024, 1, 12))

    assert ids == ["10", "20", "30"]
    _, kwargs = session.get.call_args
    assert kwargs["params"] == {"start_date": "2024-01-11", "end_date": "2024-01-12", "api_key": "TEST_KEY"}


def test_fetch_feed_ids_rejects_long_span():
    client, _ = make_client({})

    with pytest.raises(ValueError):
        client.fetch_feed_ids(date(2024, 1, 1), date(2024, 1, 8))


def test_context_manager_closes_session():
    client, session = make_client({})
    with client:
        assert client.session is session
    session.close.assert_called_once()


def test_null_feed_lists_no_ids():
    client, _ = make_client({"near_earth_objects": None})

    assert client.fetch_feed_ids(date(2024, 1, 1)) == []


@pytest.mark.parametrize("body", [
    ["not", "a", "feed"],
    {"near_earth_objects": ["2024-01-01"]},
    {"near_earth_objects": {"2024-01-01": "10"}},
    {"near_earth_objects": {"2024-01-01": [{"id": "10"}, "20"]}},
])
def test_malformed_feed_raises_fetch_error(body):
    client, _ = make_client(body)

    with pytest.raises(NeoFetchError):
        client.fetch_feed_ids(date(2024, 1, 1))


def test_each_thread_gets_its_own_session():
    created = []

    def factory():
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        created.append(session)
        return session

    client = NeoWsClient(api_key="TEST_KEY", session_factory=factory)
    seen = {}
    workers = [threading.Thread(target=lambda n=n: seen.__setitem__(n, client.session)) for n in range(3)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    assert len({id(s) for s in seen.values()}) == 3
    assert client.session is client.session
    assert len(created) == 4
    assert created[0].headers["User-Agent"] == "NeoWatch/1.0"

    client.close()

    for session in created:
        session.close.assert_called_once()
