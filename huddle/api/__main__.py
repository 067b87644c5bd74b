"""Run the API server with uvicorn."""

import uvicorn

from huddle.api.app import create_app
from huddle.api.dependencies import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(), host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
