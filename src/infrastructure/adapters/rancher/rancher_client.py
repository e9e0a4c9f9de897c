import logging
import os
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.infrastructure.adapters.rancher.rancher_errors import (
    RancherApiError,
    RancherError,
    RancherNetworkError,
    RancherTimeoutError,
)
from src.interaction.interfaces.control_plane_client import ControlPlaneClient

logger = logging.getLogger(__name__)


class RancherControlPlaneClient(ControlPlaneClient):
    """
    HTTP client for a Rancher (v2-beta API) environment.
    Reads are retried with backoff; mutating calls are sent once.
    """

    def __init__(
        self,
        base_url: str,
        access_key: str = "",
        secret_key: str = "",
        log_dir: str = "/tmp/chatops-logs",
        log_tail_lines: int = 500,
        canary_config: str = "",
        max_retries: int = 3,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.log_dir = log_dir
        self.log_tail_lines = log_tail_lines
        self.canary_config = canary_config
        self.timeout = timeout
        self.session = session or self._create_session(max_retries)
        if access_key or secret_key:
            self.session.auth = (access_key, secret_key)

    def _create_session(self, max_retries: int) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=0.5,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def restart_container(self, container_id: str) -> Dict[str, Any]:
        return self._request("POST", f"containers/{container_id}", params={"action": "restart"})

    def fetch_logs(self, container_id: str) -> str:
        """
        Writes the container's log tail to LOG_DIR and returns the file path.
        Expects a plain-text logs endpoint (a proxy in front of Rancher);
        stock v2-beta only offers the websocket `?action=logs` action.
        """
        response = self._send(
            "GET",
            f"containers/{container_id}/logs",
            params={"lines": self.log_tail_lines},
        )
        safe_id = container_id.replace("/", "_")
        path = os.path.join(self.log_dir, f"{safe_id}-{int(time.time())}.log")
        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(response.text)
        except OSError as e:
            logger.error(f"Failed to write log artifact {path}: {e}")
            raise RancherError(f"Failed to write log artifact: {e}") from e
        return path

    def get_service(self, service_id: str) -> Dict[str, Any]:
        return self._request("GET", f"services/{service_id}")

    def get_haproxy_config(self, lb_id: str) -> Dict[str, Any]:
        return self._request("GET", f"loadbalancerservices/{lb_id}")

    def enable_canary(self, lb_id: str) -> Dict[str, Any]:
        return self._set_lb_config(lb_id, self.canary_config)

    def disable_canary(self, lb_id: str) -> Dict[str, Any]:
        return self._set_lb_config(lb_id, "")

    def _set_lb_config(self, lb_id: str, config: str) -> Dict[str, Any]:
        current = self.get_haproxy_config(lb_id)
        lb_config = dict(current.get("lbConfig") or {})
        lb_config["config"] = config
        return self._request("PUT", f"loadbalancerservices/{lb_id}", json={"lbConfig": lb_config})

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = self._send(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Rancher invalid JSON on {method} {path}: {e}")
            raise RancherNetworkError("Invalid JSON response") from e
        return data if isinstance(data, dict) else {"data": data}

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"Rancher timeout on {method} {path}: {e}")
            raise RancherTimeoutError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"Rancher network error on {method} {path}: {e}")
            raise RancherNetworkError(f"Request failed: {str(e)}") from e

        if response.status_code >= 400:
            self._handle_api_error(response)
        return response

    def _handle_api_error(self, response: requests.Response):
        description = response.reason or "Unknown error"
        code = None
        try:
            body = response.json()
            if isinstance(body, dict):
                description = body.get("message") or body.get("detail") or description
                code = body.get("code")
        except ValueError:
            pass

        logger.warning(f"Rancher API Error {response.status_code}: {description}")
        raise RancherApiError(response.status_code, description, code)
