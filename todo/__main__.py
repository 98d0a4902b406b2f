"""Serve the API with uvicorn on the configured port: ``python -m todo``."""

from __future__ import annotations

import uvicorn

from todo.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "todo.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
