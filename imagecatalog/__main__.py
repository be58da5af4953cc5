import logging

import uvicorn

from .config import load_settings
from .logging_config import configure_logging

logger = logging.getLogger("imagecatalog")


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Server running on http://localhost:%s", settings.port)
    uvicorn.run(
        "imagecatalog.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
