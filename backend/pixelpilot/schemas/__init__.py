"""PixelPilot Backend — Pydantic schemas."""
