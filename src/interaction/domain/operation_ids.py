RESTART_CONTAINER = "restartContainer"
LOGS_CONTAINER = "logsContainer"
GET_SERVICE_INFO = "getServiceInfo"
CANARY_ACTIVATE = "canaryActivate"
CANARY_DISABLE = "canaryDisable"
CANARY_INFO = "canaryInfo"

ALL_OPERATION_IDS = (
    RESTART_CONTAINER,
    LOGS_CONTAINER,
    GET_SERVICE_INFO,
    CANARY_ACTIVATE,
    CANARY_DISABLE,
    CANARY_INFO,
)
