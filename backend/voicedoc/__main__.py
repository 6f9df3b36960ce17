"""Run the proxy with uvicorn: ``python -m voicedoc``."""

import uvicorn

from voicedoc.config import settings


def main() -> None:
    uvicorn.run(
        "voicedoc.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
