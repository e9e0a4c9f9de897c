import json
from typing import Any, Dict


def extract_field(payload: Any, path: str) -> str:
    """
    Dotted-path lookup into a nested payload ("launchConfig.imageUuid").
    Missing or null values render as an empty string.
    """
    current = payload
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return ""
        current = current[key]
    if current is None:
        return ""
    if isinstance(current, (dict, list)):
        return json.dumps(current, ensure_ascii=False)
    if isinstance(current, bool):
        return "true" if current else "false"
    return str(current)


def format_restart(container_id: str, user_name: str) -> str:
    return f"Container de ID {container_id} restartado por @{user_name} com sucesso! :sunglasses:\n\n"


def format_service_info(service: Dict[str, Any]) -> str:
    return (
        f"*ID:* `{extract_field(service, 'id')}`\n"
        f"*Nome:* `{extract_field(service, 'name')}`\n"
        f"*Imagem:* `{extract_field(service, 'launchConfig.imageUuid')}`\n"
        f"*Status:* `{extract_field(service, 'state')}`\n"
        f"*Data de Criação:* `{extract_field(service, 'created')}`"
    )


def format_canary_toggle(lb_id: str, enabled: bool, payload: Dict[str, Any]) -> str:
    state = "ativado" if enabled else "desativado"
    body = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return f"*Canary Deployment* do LB `{lb_id}` {state}.\n```{body}```"


def format_haproxy_config(lb_id: str, payload: Dict[str, Any]) -> str:
    return f"Arquivo haproxy.cfg do LoadBalancer `{lb_id}`.\n```{extract_field(payload, 'lbConfig.config')}```"


def format_cancel_notice(user_name: str) -> str:
    return f":x: @{user_name} cancelou a requisição"


def format_logs_title(container_id: str) -> str:
    return f"Logs do container: {container_id}"


def format_failure(operation_id: str, value: str, reason: str) -> str:
    return f":warning: Falha ao executar `{operation_id}` para `{value}`: {reason}"
