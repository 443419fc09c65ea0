"""Configuration package -- typed, validated settings from YAML + .env."""

from .settings import ExtractionSettings, PipelineSettings

__all__ = [
    "ExtractionSettings",
    "PipelineSettings",
]
