"""Core configuration"""

from .config import Config, Env

__all__ = ["Config", "Env"]
