"""
Shared primitive data types for the simulation core.

Screen coordinates are used throughout: the origin is the top-left corner
of the arena, x grows to the right and y grows downward.
"""

import math

from pydantic import BaseModel, ConfigDict, computed_field, field_validator


class Point2D(BaseModel):
    """Immutable 2D point/vector for positions, velocities and offsets.

    Attributes:
        x: X coordinate (horizontal, grows rightward)
        y: Y coordinate (vertical, grows downward)

    Examples:
        >>> spawn = Point2D(x=350.0, y=550.0)
        >>> velocity = Point2D(x=-75.0, y=0.0)  # Moving left
        >>> velocity.length
        75.0
    """
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    @property
    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Point2D') -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


# Velocities read better as vectors
Vector2D = Point2D


class Rectangle(BaseModel):
    """Immutable axis-aligned rectangle used for hitboxes.

    Position is the top-left corner (pygame convention).

    Attributes:
        x: X coordinate of top-left corner
        y: Y coordinate of top-left corner
        width: Width of rectangle (must be positive)
        height: Height of rectangle (must be positive)

    Examples:
        >>> rect = Rectangle(x=100.0, y=100.0, width=32.0, height=46.0)
        >>> rect.right
        132.0
    """
    x: float
    y: float
    width: float
    height: float

    @field_validator('width', 'height')
    @classmethod
    def validate_positive_dimensions(cls, v: float) -> float:
        """Validate dimensions are positive."""
        if v <= 0:
            raise ValueError(f'Rectangle dimensions must be positive, got {v}')
        return v

    @computed_field
    @property
    def left(self) -> float:
        """Get left edge x coordinate."""
        return self.x

    @computed_field
    @property
    def right(self) -> float:
        """Get right edge x coordinate."""
        return self.x + self.width

    @computed_field
    @property
    def top(self) -> float:
        """Get top edge y coordinate."""
        return self.y

    @computed_field
    @property
    def bottom(self) -> float:
        """Get bottom edge y coordinate."""
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        """Center point of the rectangle."""
        return Point2D(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def overlaps(self, other: 'Rectangle') -> bool:
        """Check whether two rectangles share interior area.

        Interval intersection on both axes. Rectangles that only touch
        along an edge do not overlap.

        Examples:
            >>> a = Rectangle(x=0.0, y=0.0, width=10.0, height=10.0)
            >>> a.overlaps(Rectangle(x=5.0, y=5.0, width=10.0, height=10.0))
            True
            >>> a.overlaps(Rectangle(x=10.0, y=0.0, width=10.0, height=10.0))
            False
        """
        return (self.left < other.right and other.left < self.right and
                self.top < other.bottom and other.top < self.bottom)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        """String representation for debugging."""
        return f"Rectangle(x={self.x:.2f}, y={self.y:.2f}, w={self.width:.2f}, h={self.height:.2f})"
