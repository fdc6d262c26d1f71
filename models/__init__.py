"""
Shared models for the Time Racers project.

This package provides the small immutable Pydantic types the simulation
core and the front end exchange:
- Point2D / Vector2D: positions, velocities and spawn points
- Rectangle: axis-aligned hitboxes and arena bounds

Usage:
    >>> from models import Point2D, Rectangle
    >>> box = Rectangle(x=350.0, y=550.0, width=32.0, height=46.0)
    >>> box.overlaps(Rectangle(x=360.0, y=560.0, width=32.0, height=46.0))
    True
"""

from .primitives import (
    Point2D,
    Vector2D,
    Rectangle,
)

__all__ = [
    'Point2D',
    'Vector2D',
    'Rectangle',
]
