from .app import BenchmarkService, create_app, serve

__all__ = ["BenchmarkService", "create_app", "serve"]
