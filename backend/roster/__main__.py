"""Process entry point - `python -m roster` or the `roster-api` script.

Startup connects both stores inside the app lifespan; if either is unreachable
uvicorn aborts startup and exits with a non-zero status.
"""

import uvicorn

from roster.config import get_settings
from roster.infrastructure.observability import setup_logging
from roster.main import create_app


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
