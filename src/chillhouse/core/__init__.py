"""Core functionality shared by the Chillhouse service.

- **ChillhouseConfig**: Configuration management using Pydantic Settings
- **config**: Global configuration instance (loads from environment variables)
"""

from chillhouse.core.config import ChillhouseConfig, config

__all__ = [
    "ChillhouseConfig",
    "config",
]
