"""
Entry point: python -m rank_relay
"""

import uvicorn

from rank_relay.config import settings


def main() -> None:
    """Run the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "rank_relay.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower()
    )


if __name__ == "__main__":
    main()
