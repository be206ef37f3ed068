# File: openwaitlist/core/logging_config.py

import logging

DEV_FORMAT = "%(asctime)s - {service} - %(name)s - %(levelname)s - %(message)s"
PROD_FORMAT = "%(asctime)s {service} %(levelname)s %(message)s"


def configure_logging(level: str = "info", environment: str = "development", service: str = "api") -> None:
    """
    Configure root logging once for the process.

    `level` accepts the usual names in any case ("debug", "INFO", ...);
    unknown names fall back to INFO.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    fmt = DEV_FORMAT if environment == "development" else PROD_FORMAT

    logging.basicConfig(
        level=numeric_level,
        format=fmt.format(service=service),
        force=True,
    )

    # uvicorn's access log duplicates the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
