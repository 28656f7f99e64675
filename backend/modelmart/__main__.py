"""Run the API with uvicorn: python -m modelmart"""

import uvicorn

from modelmart.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "modelmart.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # setup_logging in the lifespan owns the root logger
    )


if __name__ == "__main__":
    main()
