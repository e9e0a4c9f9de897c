import pytest

from src.interaction.domain import operation_ids
from src.interaction.domain.adapter_errors import ControlPlaneTimeoutError
from src.interaction.domain.callback_errors import MissingAttachmentError, MissingSelectionError
from src.interaction.domain.interaction_callback import ActionKind, InteractionCallback, TriggeringUser
from src.interaction.domain.original_message import OriginalMessage
from src.interaction.services.operation_handlers import RESULT_COLOR, OperationHandlers
from src.tests.harness.interaction_fakes import (
    BOT_CHANNEL,
    FailingControlPlane,
    FakeChatClient,
    FakeControlPlaneClient,
    NoWaitArtifactWaiter,
    original_message,
)


def _callback(operation_id, value="svc-1", kind=ActionKind.SELECT, original=None) -> InteractionCallback:
    return InteractionCallback(
        verification_token="T",
        action_kind=kind,
        operation_id=operation_id,
        user=TriggeringUser("U1", "maria"),
        channel_id="C-ORIG",
        message_ts="1500000000.000100",
        original_message=OriginalMessage.from_dict(original if original is not None else original_message()),
        selected_value=value,
    )


def _handlers(chat=None, control_plane=None):
    chat = chat or FakeChatClient()
    control_plane = control_plane or FakeControlPlaneClient()
    handlers = OperationHandlers(chat, control_plane, BOT_CHANNEL, artifact_waiter=NoWaitArtifactWaiter())
    return handlers, chat, control_plane


@pytest.mark.parametrize("operation_id,control_plane_method", [
    (operation_ids.RESTART_CONTAINER, "restart_container"),
    (operation_ids.GET_SERVICE_INFO, "get_service"),
    (operation_ids.CANARY_ACTIVATE, "enable_canary"),
    (operation_ids.CANARY_DISABLE, "disable_canary"),
    (operation_ids.CANARY_INFO, "get_haproxy_config"),
])
def test_select_handlers_call_post_then_delete(operation_id, control_plane_method):
    handlers, chat, control_plane = _handlers()

    outcome = handlers.registry().resolve(operation_id)(_callback(operation_id))

    assert control_plane.calls == [(control_plane_method, "svc-1")]
    assert [c[0] for c in chat.calls] == ["post_message", "delete_message"]
    assert chat.calls[0][1] == BOT_CHANNEL
    assert chat.calls[0][2]["color"] == RESULT_COLOR
    assert chat.calls[1][1:] == ("C-ORIG", "1500000000.000100")
    assert outcome.status_code == 200
    assert outcome.body is None
    assert outcome.after_response == []


def test_service_info_formats_five_fields():
    control_plane = FakeControlPlaneClient(responses={"get_service": {
        "id": "svc-1",
        "name": "web",
        "launchConfig": {"imageUuid": "img:1"},
        "state": "active",
        "created": "2020-01-01",
    }})
    handlers, chat, _ = _handlers(control_plane=control_plane)

    handlers.service_info(_callback(operation_ids.GET_SERVICE_INFO))

    text = chat.named("post_message")[0][2]["text"]
    assert text == (
        "*ID:* `svc-1`\n"
        "*Nome:* `web`\n"
        "*Imagem:* `img:1`\n"
        "*Status:* `active`\n"
        "*Data de Criação:* `2020-01-01`"
    )
    assert len(chat.named("delete_message")) == 1


def test_restart_message_names_user():
    handlers, chat, _ = _handlers()

    handlers.restart_container(_callback(operation_ids.RESTART_CONTAINER, value="1i42"))

    text = chat.named("post_message")[0][2]["text"]
    assert text.startswith("Container de ID 1i42 restartado por @maria com sucesso!")


def test_canary_toggle_messages():
    control_plane = FakeControlPlaneClient(responses={"enable_canary": {"state": "active"}})
    handlers, chat, _ = _handlers(control_plane=control_plane)

    handlers.enable_canary(_callback(operation_ids.CANARY_ACTIVATE, value="1s5"))
    handlers.disable_canary(_callback(operation_ids.CANARY_DISABLE, value="1s5"))

    posts = [c[2]["text"] for c in chat.named("post_message")]
    assert posts[0].startswith("*Canary Deployment* do LB `1s5` ativado.\n```")
    assert '"state": "active"' in posts[0]
    assert posts[1].startswith("*Canary Deployment* do LB `1s5` desativado.")


def test_logs_handler_uploads_and_defers_delete():
    control_plane = FakeControlPlaneClient(responses={"fetch_logs": "/tmp/1i42.log"})
    handlers, chat, _ = _handlers(control_plane=control_plane)

    outcome = handlers.logs_container(_callback(operation_ids.LOGS_CONTAINER, value="1i42"))

    assert control_plane.calls == [("fetch_logs", "1i42")]
    assert handlers.artifact_waiter.paths == ["/tmp/1i42.log"]
    assert chat.calls == [("upload_file", "/tmp/1i42.log", [BOT_CHANNEL], "Logs do container: 1i42", "text")]
    assert outcome.status_code == 200
    assert outcome.body["attachments"] == []
    assert outcome.body["files"] == [{"id": "F123", "title": "Logs do container: 1i42", "filetype": "text"}]

    for task in outcome.after_response:
        task()
    assert chat.named("delete_message") == [("delete_message", "C-ORIG", "1500000000.000100")]


def test_logs_upload_failure_posts_notice_and_deletes():
    chat = FakeChatClient(fail_on=["upload_file"])
    handlers, _, _ = _handlers(chat=chat)

    outcome = handlers.logs_container(_callback(operation_ids.LOGS_CONTAINER, value="1i42"))

    assert [c[0] for c in chat.calls] == ["upload_file", "post_message", "delete_message"]
    assert outcome.status_code == 200
    assert outcome.body is None


def test_cancel_responds_with_notice_then_deletes():
    handlers, chat, control_plane = _handlers()

    outcome = handlers.cancel(_callback("anything", value=None, kind=ActionKind.CANCEL))

    first = outcome.body["attachments"][0]
    assert first["actions"] == []
    assert first["fields"] == [{"title": ":x: @maria cancelou a requisição", "value": "", "short": False}]
    assert chat.calls == []

    for task in outcome.after_response:
        task()
    assert chat.calls == [("delete_message", "C-ORIG", "1500000000.000100")]
    assert control_plane.calls == []


def test_cancel_without_attachment_is_structural_error():
    handlers, chat, _ = _handlers()
    callback = _callback("anything", value=None, kind=ActionKind.CANCEL, original=original_message(False))

    with pytest.raises(MissingAttachmentError):
        handlers.cancel(callback)
    assert chat.calls == []


def test_missing_selection_fails_before_any_call():
    handlers, chat, control_plane = _handlers()

    with pytest.raises(MissingSelectionError):
        handlers.service_info(_callback(operation_ids.GET_SERVICE_INFO, value=None))

    assert chat.calls == []
    assert control_plane.calls == []


def test_control_plane_failure_is_posted_and_original_deleted():
    handlers, chat, _ = _handlers(control_plane=FailingControlPlane("service not found"))

    outcome = handlers.service_info(_callback(operation_ids.GET_SERVICE_INFO))

    text = chat.named("post_message")[0][2]["text"]
    assert text.startswith(":warning: Falha ao executar `getServiceInfo` para `svc-1`")
    assert "service not found" in text
    assert len(chat.named("delete_message")) == 1
    assert outcome.status_code == 200


def test_control_plane_timeout_maps_to_server_error():
    control_plane = FakeControlPlaneClient(error=ControlPlaneTimeoutError("timed out"))
    handlers, chat, _ = _handlers(control_plane=control_plane)

    outcome = handlers.restart_container(_callback(operation_ids.RESTART_CONTAINER))

    assert outcome.status_code == 500
    assert [c[0] for c in chat.calls] == ["post_message", "delete_message"]


def test_chat_failures_are_not_propagated():
    chat = FakeChatClient(fail_on=["post_message", "delete_message"])
    handlers, _, control_plane = _handlers(chat=chat)

    outcome = handlers.restart_container(_callback(operation_ids.RESTART_CONTAINER))

    assert outcome.status_code == 200
    assert control_plane.calls == [("restart_container", "svc-1")]
    assert [c[0] for c in chat.calls] == ["post_message", "delete_message"]
