import logging
from typing import Any, Callable, Dict, Optional

from src.interaction.domain import operation_ids
from src.interaction.domain.adapter_errors import (
    ChatAdapterError,
    ControlPlaneError,
    ControlPlaneTimeoutError,
)
from src.interaction.domain.callback_errors import MissingSelectionError
from src.interaction.domain.dispatch_outcome import DispatchOutcome
from src.interaction.domain.interaction_callback import InteractionCallback
from src.interaction.domain.original_message import FileReference
from src.interaction.interfaces.chat_client import ChatClient
from src.interaction.interfaces.control_plane_client import ControlPlaneClient
from src.interaction.services import result_formatter
from src.interaction.services.action_router import ActionRegistry
from src.interaction.services.artifact_waiter import ArtifactWaiter
from src.interaction.services.message_lifecycle import MessageLifecycle

logger = logging.getLogger(__name__)

RESULT_COLOR = "#0C648A"


class OperationHandlers:
    """
    One handler per control-plane operation, plus the cancel path.

    Within a request the order is always: control-plane call, chat post,
    delete of the originating message. Control-plane failures are posted
    to the channel in place of the result; chat failures are only logged.
    """

    def __init__(
        self,
        chat: ChatClient,
        control_plane: ControlPlaneClient,
        bot_channel: str,
        lifecycle: Optional[MessageLifecycle] = None,
        artifact_waiter: Optional[ArtifactWaiter] = None,
    ):
        self.chat = chat
        self.control_plane = control_plane
        self.bot_channel = bot_channel
        self.lifecycle = lifecycle or MessageLifecycle()
        self.artifact_waiter = artifact_waiter or ArtifactWaiter()

    def registry(self) -> ActionRegistry:
        return ActionRegistry({
            operation_ids.RESTART_CONTAINER: self.restart_container,
            operation_ids.LOGS_CONTAINER: self.logs_container,
            operation_ids.GET_SERVICE_INFO: self.service_info,
            operation_ids.CANARY_ACTIVATE: self.enable_canary,
            operation_ids.CANARY_DISABLE: self.disable_canary,
            operation_ids.CANARY_INFO: self.canary_info,
        })

    def restart_container(self, callback: InteractionCallback) -> DispatchOutcome:
        return self._run(
            callback,
            self.control_plane.restart_container,
            lambda value, _: result_formatter.format_restart(value, callback.user.name),
        )

    def service_info(self, callback: InteractionCallback) -> DispatchOutcome:
        return self._run(
            callback,
            self.control_plane.get_service,
            lambda _, payload: result_formatter.format_service_info(payload),
        )

    def enable_canary(self, callback: InteractionCallback) -> DispatchOutcome:
        return self._run(
            callback,
            self.control_plane.enable_canary,
            lambda value, payload: result_formatter.format_canary_toggle(value, True, payload),
        )

    def disable_canary(self, callback: InteractionCallback) -> DispatchOutcome:
        return self._run(
            callback,
            self.control_plane.disable_canary,
            lambda value, payload: result_formatter.format_canary_toggle(value, False, payload),
        )

    def canary_info(self, callback: InteractionCallback) -> DispatchOutcome:
        return self._run(
            callback,
            self.control_plane.get_haproxy_config,
            result_formatter.format_haproxy_config,
        )

    def logs_container(self, callback: InteractionCallback) -> DispatchOutcome:
        """
        Uploads the log artifact and answers with the original message
        rewritten to reference the file. The original message is deleted
        only after the response has been written.
        """
        value = self._require_selection(callback)
        try:
            path = self.control_plane.fetch_logs(value)
        except ControlPlaneError as e:
            return self._control_plane_failed(callback, value, e)

        self.artifact_waiter.wait(path)

        try:
            uploaded = self.chat.upload_file(
                path,
                channels=[self.bot_channel],
                title=result_formatter.format_logs_title(value),
                filetype="text",
            )
        except ChatAdapterError as e:
            logger.error(f"Erro ao fazer upload de arquivo de logs de container: {e}")
            self._post(result_formatter.format_failure(callback.operation_id, value, str(e)))
            self._delete_original(callback)
            return DispatchOutcome.empty()

        file_ref = FileReference(
            id=uploaded.id,
            title=result_formatter.format_logs_title(value),
            filetype="text",
        )
        updated = self.lifecycle.with_file(callback.original_message, file_ref)
        return DispatchOutcome(
            status_code=200,
            body=updated.to_dict(),
            after_response=[lambda: self._delete_original(callback)],
        )

    def cancel(self, callback: InteractionCallback) -> DispatchOutcome:
        title = result_formatter.format_cancel_notice(callback.user.name)
        body = self.lifecycle.respond(callback.original_message, title, "")
        return DispatchOutcome(
            status_code=200,
            body=body,
            after_response=[lambda: self._delete_original(callback)],
        )

    def _run(
        self,
        callback: InteractionCallback,
        call: Callable[[str], Any],
        render: Callable[[str, Any], str],
    ) -> DispatchOutcome:
        value = self._require_selection(callback)
        try:
            payload = call(value)
        except ControlPlaneError as e:
            return self._control_plane_failed(callback, value, e)

        self._post(render(value, payload))
        self._delete_original(callback)
        return DispatchOutcome.empty()

    def _control_plane_failed(
        self,
        callback: InteractionCallback,
        value: str,
        error: ControlPlaneError,
    ) -> DispatchOutcome:
        logger.error(f"Control plane call '{callback.operation_id}' failed for '{value}': {error}")
        self._post(result_formatter.format_failure(callback.operation_id, value, str(error)))
        self._delete_original(callback)
        if isinstance(error, ControlPlaneTimeoutError):
            return DispatchOutcome.empty(500)
        return DispatchOutcome.empty()

    @staticmethod
    def _require_selection(callback: InteractionCallback) -> str:
        if not callback.selected_value:
            raise MissingSelectionError(f"Callback '{callback.operation_id}' has no selected option")
        return callback.selected_value

    def _post(self, text: str) -> Optional[Dict[str, Any]]:
        try:
            return self.chat.post_message(self.bot_channel, {"text": text, "color": RESULT_COLOR})
        except ChatAdapterError as e:
            logger.error(f"Failed to post message to {self.bot_channel}: {e}")
            return None

    def _delete_original(self, callback: InteractionCallback) -> None:
        try:
            self.chat.delete_message(callback.channel_id, callback.message_ts)
        except ChatAdapterError as e:
            logger.error(f"Failed to delete message {callback.message_ts} in {callback.channel_id}: {e}")
