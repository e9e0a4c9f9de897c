from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from src.interaction.domain.callback_errors import UnknownActionKindError, UnknownOperationError
from src.interaction.domain.dispatch_outcome import DispatchOutcome
from src.interaction.domain.interaction_callback import ActionKind, InteractionCallback

Handler = Callable[[InteractionCallback], DispatchOutcome]


class ActionRegistry:
    """
    Operation id -> handler. Built once at startup and read-only afterwards.
    """

    def __init__(self, handlers: Mapping[str, Handler]):
        self._handlers = MappingProxyType(dict(handlers))

    def resolve(self, operation_id: str) -> Optional[Handler]:
        return self._handlers.get(operation_id)

    def operation_ids(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class ActionRouter:
    """
    Selects the handler for a callback. Does not invoke it.
    """

    def __init__(self, registry: ActionRegistry, cancel_handler: Handler):
        self.registry = registry
        self.cancel_handler = cancel_handler

    def route(self, callback: InteractionCallback) -> Handler:
        if callback.action_kind is ActionKind.SELECT:
            handler = self.registry.resolve(callback.operation_id)
            if handler is None:
                raise UnknownOperationError(f"Unknown operation id: {callback.operation_id}")
            return handler

        if callback.action_kind is ActionKind.CANCEL:
            return self.cancel_handler

        raise UnknownActionKindError(f"Ação inválida: {callback.action_kind}")


def build_router(handlers) -> ActionRouter:
    """Wires an ActionRouter from an OperationHandlers instance."""
    return ActionRouter(handlers.registry(), handlers.cancel)
