from typing import Optional

from src.interaction.domain.adapter_errors import ControlPlaneError, ControlPlaneTimeoutError


class RancherError(ControlPlaneError):
    """Base class for Rancher API errors."""
    pass


class RancherApiError(RancherError):
    """Non-2xx answer from the Rancher API."""

    def __init__(self, status_code: int, description: str, code: Optional[str] = None):
        super().__init__(f"Rancher API error {status_code}: {description}")
        self.status_code = status_code
        self.description = description
        self.code = code


class RancherNetworkError(RancherError):
    """Network connectivity error."""
    pass


class RancherTimeoutError(RancherNetworkError, ControlPlaneTimeoutError):
    pass
