"""ASGI entrypoint for the product health API."""

from product_health.api.app import create_app
from product_health.containers import build_container

app = create_app(build_container())
