class CallbackError(Exception):
    """Base class for errors raised while handling an interaction callback."""
    status_code = 500


class DecodeError(CallbackError):
    """Malformed wire payload."""
    status_code = 500


class AuthError(CallbackError):
    """Verification token does not match the configured secret."""
    status_code = 401


class UnsupportedMethodError(CallbackError):
    status_code = 405


class UnknownActionKindError(CallbackError):
    status_code = 500


class UnknownOperationError(CallbackError):
    """
    Operation id not present in the registry.
    Dispatched as a no-op: nothing is called and an empty 200 is returned.
    """
    status_code = 200


class MalformedCallbackError(CallbackError):
    """Callback decoded fine but lacks a structure the handler needs."""
    status_code = 500


class MissingAttachmentError(MalformedCallbackError):
    pass


class MissingSelectionError(MalformedCallbackError):
    pass
