"""Domain policies package."""

from .allocation import classify_holding, color_for_category

__all__ = ["classify_holding", "color_for_category"]
