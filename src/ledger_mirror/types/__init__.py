"""Shared model and result types."""

from .base import CamelModel, StrictBaseModel
from .pageable import Pageable

__all__ = [
    "CamelModel",
    "Pageable",
    "StrictBaseModel",
]
