"""Entrypoint: run the support router server."""

import uvicorn

from support_router.api.app import create_app
from support_router.config.settings import Settings


def main() -> None:
    settings = Settings()
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
