"""Run the image store with uvicorn: ``python -m image_store``."""

import uvicorn

from config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "image_store.main:app",
        host=settings.host,
        port=settings.port,
        workers=settings.worker_count,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
