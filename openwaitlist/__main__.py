# openwaitlist/__main__.py

"""
Run the API server.

    python -m openwaitlist
"""

import uvicorn

from openwaitlist.core.config import settings


def main() -> None:
    # lifespan startup (connect, ping, migrate) finishes before uvicorn binds
    uvicorn.run(
        "openwaitlist.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
