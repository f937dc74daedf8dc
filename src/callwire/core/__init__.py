from callwire.core.app import Application
from callwire.core.config import Config, ServerConfig
from callwire.core.container import Container
from callwire.core.module import Module

__all__ = [
    "Application",
    "Config",
    "Container",
    "Module",
    "ServerConfig",
]
