import logging
import os
import sys

# Ensure src is in python path
sys.path.append(os.path.dirname(__file__))

from src.config.settings import settings
from src.infrastructure.inbound.slack.slack_interaction_server import run_server


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    missing = [
        name for name in ("SLACK_BOT_TOKEN", "SLACK_BOT_CHANNEL", "SLACK_VERIFICATION_TOKEN")
        if not getattr(settings, name)
    ]
    if missing:
        print(f"Missing required settings: {', '.join(missing)}")
        sys.exit(1)

    print(f"Listening for Slack interactions on {settings.SERVER_HOST}:{settings.SERVER_PORT}{settings.INTERACTIONS_PATH}")
    run_server(settings)


if __name__ == "__main__":
    main()
