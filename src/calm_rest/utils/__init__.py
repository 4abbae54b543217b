"""Utility modules for calm_rest."""

from .channel import ChannelClosedError, ItemChannel
from .pagination import paginate_json

__all__ = [
    "ChannelClosedError",
    "ItemChannel",
    "paginate_json",
]
