"""
Server Package - HTTP surface consumed by the viewer

Package Structure:
- controller: FastAPI routes and create_app()
- source: LogSource interface and the in-memory catalog backend
"""
from .controller import LogStoreController, create_app
from .source import LogSource, InMemoryLogSource

__all__ = [
    'LogStoreController',
    'create_app',
    'LogSource',
    'InMemoryLogSource',
]
