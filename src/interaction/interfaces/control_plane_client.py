from abc import ABC, abstractmethod
from typing import Any, Dict


class ControlPlaneClient(ABC):
    """
    Interface for the container-orchestration control plane.
    Payloads are returned as opaque dicts. Implementations raise
    ControlPlaneError (or ControlPlaneTimeoutError) on failure.
    """
    @abstractmethod
    def restart_container(self, container_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def fetch_logs(self, container_id: str) -> str:
        """Returns the local path of the log artifact."""
        pass

    @abstractmethod
    def get_service(self, service_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def enable_canary(self, lb_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def disable_canary(self, lb_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_haproxy_config(self, lb_id: str) -> Dict[str, Any]:
        pass
