"""Run the idleview service with uvicorn."""

import uvicorn

from idleview.config import Settings


def main() -> None:
    """Start the control API and the photo runtime."""
    settings = Settings()
    uvicorn.run("idleview.api.asgi:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
