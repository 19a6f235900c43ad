"""ASGI entrypoint for the pill reserves API."""

import os

from pill_reserves.api.app import create_app
from pill_reserves.config import load_settings
from pill_reserves.containers import build_container

app = create_app(
    build_container(load_settings(os.getenv("PILLRESERVES_CONFIG", "config.toml")))
)
