"""
Run the TowGo API server with ``python -m towgo.server``.
"""

import uvicorn

from .core.config import settings


def main() -> None:
    uvicorn.run(
        "towgo.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
