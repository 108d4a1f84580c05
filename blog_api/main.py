"""Process entrypoint: ``python -m blog_api`` or the ``blog-api`` script.

uvicorn traps SIGINT/SIGTERM and runs the app's lifespan shutdown, which
writes the final snapshot before the process exits.
"""
from __future__ import annotations

import uvicorn

from blog_api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "blog_api.app_factory:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
