"""Unit tests for the control service clients (mocked transport)."""

from __future__ import annotations

import pytest
import requests

from operator_agent.agent.errors import AckError, RemoteDecodeError, RemoteFetchError
from operator_agent.agent.remote.client import RemoteConfigClient, RemoteTriggerClient
from operator_agent.agent.remote.models import Trigger

BASE = "http://control.example:8000"

TRIGGER = {
    "id": 7,
    "type": "must-gather",
    "cluster": "cluster-a",
    "reason": "customer case",
    "link": "https://example.com/case/1",
    "triggered_at": "2019-09-01T10:00:00",
    "triggered_by": "tester",
    "parameters": "{}",
    "active": 1,
}


def test_fetch_configuration_decodes_object(session: requests.Session, respond) -> None:
    session.get.return_value = respond(200, {"no_op": "Y", "interval": 5})
    client = RemoteConfigClient(base_url=BASE + "/", timeout=3.0, session=session)

    delta = client.fetch("cluster-a")

    assert delta == {"no_op": "Y", "interval": 5}
    session.get.assert_called_once_with(
        f"{BASE}/api/v1/operator/configuration/cluster-a", timeout=3.0
    )


def test_fetch_configuration_empty_or_null_body_is_empty_delta(
    session: requests.Session, respond
) -> None:
    client = RemoteConfigClient(base_url=BASE, session=session)

    session.get.return_value = respond(200)
    assert client.fetch("cluster-a") == {}

    session.get.return_value = respond(200, raw=b"null")
    assert client.fetch("cluster-a") == {}


@pytest.mark.parametrize("status", [204, 404, 500, 503])
def test_fetch_configuration_non_200_is_fetch_error(
    session: requests.Session, respond, status: int
) -> None:
    session.get.return_value = respond(status, {"a": 1})
    client = RemoteConfigClient(base_url=BASE, session=session)

    with pytest.raises(RemoteFetchError) as excinfo:
        client.fetch("cluster-a")

    assert excinfo.value.status_code == status
    assert not isinstance(excinfo.value, RemoteDecodeError)


def test_fetch_configuration_transport_failure_is_fetch_error(session: requests.Session) -> None:
    session.get.side_effect = requests.ConnectionError("connection refused")
    client = RemoteConfigClient(base_url=BASE, session=session)

    with pytest.raises(RemoteFetchError, match="communication error") as excinfo:
        client.fetch("cluster-a")

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fetch_configuration_malformed_body_is_decode_error(
    session: requests.Session, respond
) -> None:
    client = RemoteConfigClient(base_url=BASE, session=session)

    session.get.return_value = respond(200, raw=b"{broken")
    with pytest.raises(RemoteDecodeError):
        client.fetch("cluster-a")

    session.get.return_value = respond(200, [1, 2, 3])
    with pytest.raises(RemoteDecodeError, match="expected a JSON object"):
        client.fetch("cluster-a")


def test_cluster_id_is_a_single_path_segment(session: requests.Session, respond) -> None:
    session.get.return_value = respond(200, {})
    client = RemoteConfigClient(base_url=BASE, session=session)

    client.fetch("team/cluster 1")

    url = session.get.call_args.args[0]
    assert url == f"{BASE}/api/v1/operator/configuration/team%2Fcluster%201"


def test_fetch_triggers_preserves_service_order(session: requests.Session, respond) -> None:
    body = [{**TRIGGER, "id": i} for i in (3, 1, 2)]
    session.get.return_value = respond(200, body)
    client = RemoteTriggerClient(base_url=BASE, session=session)

    triggers = client.fetch_triggers("cluster-a")

    assert [t.id for t in triggers] == [3, 1, 2]
    assert triggers[0] == Trigger(**{**TRIGGER, "id": 3})
    session.get.assert_called_once_with(f"{BASE}/api/v1/operator/triggers/cluster-a", timeout=30.0)


def test_fetch_triggers_tolerates_missing_and_extra_fields(
    session: requests.Session, respond
) -> None:
    session.get.return_value = respond(200, [{"id": 1, "unknown": "x"}])
    client = RemoteTriggerClient(base_url=BASE, session=session)

    [trigger] = client.fetch_triggers("cluster-a")

    assert trigger.id == 1
    assert trigger.type == ""
    assert trigger.active == 0


def test_fetch_triggers_null_fields_take_defaults(session: requests.Session, respond) -> None:
    body = [
        {"id": 1, "type": "must-gather", "parameters": None, "link": None, "active": None},
        {"id": 2},
    ]
    session.get.return_value = respond(200, body)
    client = RemoteTriggerClient(base_url=BASE, session=session)

    triggers = client.fetch_triggers("cluster-a")

    assert [t.id for t in triggers] == [1, 2]
    assert triggers[0].type == "must-gather"
    assert triggers[0].parameters == ""
    assert triggers[0].link == ""
    assert triggers[0].active == 0


def test_fetch_triggers_null_body_is_empty(session: requests.Session, respond) -> None:
    session.get.return_value = respond(200, raw=b"null")
    client = RemoteTriggerClient(base_url=BASE, session=session)

    assert client.fetch_triggers("cluster-a") == []


def test_fetch_triggers_invalid_records_are_decode_errors(
    session: requests.Session, respond
) -> None:
    client = RemoteTriggerClient(base_url=BASE, session=session)

    session.get.return_value = respond(200, {"id": 1})
    with pytest.raises(RemoteDecodeError, match="expected a JSON array"):
        client.fetch_triggers("cluster-a")

    session.get.return_value = respond(200, [{"type": "no id"}])
    with pytest.raises(RemoteDecodeError, match="unexpected trigger record"):
        client.fetch_triggers("cluster-a")


def test_fetch_triggers_non_200_is_fetch_error(session: requests.Session, respond) -> None:
    session.get.return_value = respond(500)
    client = RemoteTriggerClient(base_url=BASE, session=session)

    with pytest.raises(RemoteFetchError):
        client.fetch_triggers("cluster-a")


@pytest.mark.parametrize("status", [200, 201, 202])
def test_acknowledge_success_codes(session: requests.Session, respond, status: int) -> None:
    session.put.return_value = respond(status)
    client = RemoteTriggerClient(base_url=BASE, timeout=5.0, session=session)

    client.acknowledge("cluster-a", 42)

    session.put.assert_called_once_with(
        f"{BASE}/api/v1/operator/trigger/cluster-a/ack/42", timeout=5.0
    )


@pytest.mark.parametrize("status", [204, 400, 404, 409, 500])
def test_acknowledge_other_codes_are_ack_errors(
    session: requests.Session, respond, status: int
) -> None:
    session.put.return_value = respond(status)
    client = RemoteTriggerClient(base_url=BASE, session=session)

    with pytest.raises(AckError) as excinfo:
        client.acknowledge("cluster-a", 42)

    assert excinfo.value.status_code == status
    assert session.put.call_count == 1


def test_acknowledge_transport_failure_is_ack_error(session: requests.Session) -> None:
    session.put.side_effect = requests.Timeout("timed out")
    client = RemoteTriggerClient(base_url=BASE, session=session)

    with pytest.raises(AckError, match="communication error"):
        client.acknowledge("cluster-a", 1)


def test_client_requires_base_url_and_positive_timeout(session: requests.Session) -> None:
    with pytest.raises(ValueError, match="base_url"):
        RemoteConfigClient(base_url="  ", session=session)
    with pytest.raises(ValueError, match="timeout"):
        RemoteTriggerClient(base_url=BASE, timeout=0, session=session)
