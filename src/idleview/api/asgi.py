"""ASGI entrypoint for the idleview control API."""

from idleview.api.app import create_app
from idleview.containers import build_container

app = create_app(build_container())
