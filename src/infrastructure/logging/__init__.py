"""Logging infrastructure package."""

from .logger import get_app_logger

__all__ = ["get_app_logger"]
