"""ASGI entrypoint for the SELEKT API."""

from selekt_api.api.app import create_app
from selekt_api.containers import build_container

app = create_app(build_container())
