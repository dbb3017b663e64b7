"""Chillhouse - image-to-meme relay over a hosted image-edit API."""

__version__ = "0.1.0"

from chillhouse.core.config import ChillhouseConfig, config

__all__ = [
    "ChillhouseConfig",
    "config",
]
