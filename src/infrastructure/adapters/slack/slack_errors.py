from src.interaction.domain.adapter_errors import ChatAdapterError


class SlackChatError(ChatAdapterError):
    """Base class for Slack Web API failures."""
    pass


class SlackApiCallError(SlackChatError):
    """Slack answered with ok=false."""

    def __init__(self, method: str, error: str):
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error


class SlackNetworkError(SlackChatError):
    """Network connectivity error or timeout."""
    pass
