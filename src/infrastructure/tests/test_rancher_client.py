import json

import pytest
import requests

from src.infrastructure.adapters.rancher.rancher_client import RancherControlPlaneClient
from src.infrastructure.adapters.rancher.rancher_errors import (
    RancherApiError,
    RancherNetworkError,
    RancherTimeoutError,
)
from src.interaction.domain.adapter_errors import ControlPlaneError, ControlPlaneTimeoutError


class _Response:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class _Session:
    def __init__(self, responses=None, error=None):
        self.requests = []
        self.responses = list(responses or [])
        self.error = error
        self.auth = None

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _client(session, **kwargs):
    return RancherControlPlaneClient("http://rancher/v2-beta/projects/1a5/", session=session, **kwargs)


def test_restart_container_posts_action():
    session = _Session([_Response(body={"id": "1i42", "state": "restarting"})])

    result = _client(session).restart_container("1i42")

    assert result["state"] == "restarting"
    assert session.requests == [
        ("POST", "http://rancher/v2-beta/projects/1a5/containers/1i42", {"params": {"action": "restart"}}),
    ]


def test_credentials_are_set_on_session():
    session = _Session()
    _client(session, access_key="ak", secret_key="sk")
    assert session.auth == ("ak", "sk")


def test_get_service_returns_payload():
    service = {"id": "1s3", "name": "web", "launchConfig": {"imageUuid": "docker:nginx"}}
    session = _Session([_Response(body=service)])

    assert _client(session).get_service("1s3") == service
    assert session.requests[0][1].endswith("/services/1s3")


def test_fetch_logs_writes_artifact(tmp_path):
    session = _Session([_Response(text="line 1\nline 2\n")])

    path = _client(session, log_dir=str(tmp_path), log_tail_lines=50).fetch_logs("1i42")

    with open(path, encoding="utf-8") as fh:
        assert fh.read() == "line 1\nline 2\n"
    assert session.requests[0][2] == {"params": {"lines": 50}}


def test_enable_canary_updates_lb_config():
    current = {"id": "1s5", "lbConfig": {"portRules": [{"sourcePort": 80}], "config": ""}}
    updated = {"id": "1s5", "lbConfig": {"portRules": [{"sourcePort": 80}], "config": "backend canary"}}
    session = _Session([_Response(body=current), _Response(body=updated)])

    result = _client(session, canary_config="backend canary").enable_canary("1s5")

    assert result == updated
    method, url, kwargs = session.requests[1]
    assert method == "PUT"
    assert url.endswith("/loadbalancerservices/1s5")
    assert kwargs["json"] == {"lbConfig": {"portRules": [{"sourcePort": 80}], "config": "backend canary"}}


def test_disable_canary_clears_config():
    current = {"id": "1s5", "lbConfig": {"config": "backend canary"}}
    session = _Session([_Response(body=current), _Response(body={"id": "1s5"})])

    _client(session).disable_canary("1s5")

    assert session.requests[1][2]["json"] == {"lbConfig": {"config": ""}}


def test_api_error_is_normalized():
    session = _Session([_Response(status_code=404, body={"code": "NotFound", "message": "Not Found"}, reason="Not Found")])

    with pytest.raises(RancherApiError) as exc_info:
        _client(session).get_service("missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "NotFound"
    assert isinstance(exc_info.value, ControlPlaneError)


def test_timeout_is_normalized():
    session = _Session(error=requests.Timeout("read timeout"))

    with pytest.raises(RancherTimeoutError) as exc_info:
        _client(session).get_haproxy_config("1s5")

    assert isinstance(exc_info.value, ControlPlaneTimeoutError)


def test_connection_error_is_normalized():
    session = _Session(error=requests.ConnectionError("refused"))
    with pytest.raises(RancherNetworkError):
        _client(session).restart_container("1i42")
