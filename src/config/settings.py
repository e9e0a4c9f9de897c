from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Slack
    SLACK_BOT_TOKEN: str = ""
    SLACK_BOT_CHANNEL: str = ""
    SLACK_VERIFICATION_TOKEN: str = ""

    # HTTP surface
    INTERACTIONS_PATH: str = "/slack/interactions"
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Rancher control plane
    RANCHER_URL: str = "http://localhost:8080/v2-beta/projects/1a5"
    RANCHER_ACCESS_KEY: str = ""
    RANCHER_SECRET_KEY: str = ""
    CANARY_HAPROXY_CONFIG: str = ""

    # Outbound calls
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_MAX_RETRIES: int = 3

    # Log artifacts
    LOG_DIR: str = "/tmp/chatops-logs"
    LOG_TAIL_LINES: int = 500
    LOG_ARTIFACT_INITIAL_DELAY_SECONDS: float = 2.0
    LOG_ARTIFACT_MAX_WAIT_SECONDS: float = 10.0


settings = Settings()
