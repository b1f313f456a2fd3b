"""
Todo API package.

The FastAPI application lives in ``todo_api.main`` (``todo_api.main:app``);
``todo_api.main.create_app`` builds a fresh instance from settings.
"""

__version__ = "0.1.0"
