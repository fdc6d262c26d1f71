"""Time Racers skins for rendering."""

from .base import TimeRacersSkin
from .geometric import GeometricSkin

__all__ = [
    'TimeRacersSkin',
    'GeometricSkin',
]
