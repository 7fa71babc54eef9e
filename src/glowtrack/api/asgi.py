"""ASGI entrypoint for the GlowTrack API."""

from glowtrack.api.app import create_app
from glowtrack.containers import build_container

app = create_app(build_container())
