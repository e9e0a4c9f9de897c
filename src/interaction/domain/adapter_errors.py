class ChatAdapterError(Exception):
    """Chat platform call (post, delete, upload) failed."""
    pass


class ControlPlaneError(Exception):
    """Control-plane call failed."""
    pass


class ControlPlaneTimeoutError(ControlPlaneError):
    """Control-plane call did not complete within the configured timeout."""
    pass
