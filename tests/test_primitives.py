"""Tests for the shared geometry primitives."""

import pytest
from pydantic import ValidationError

from models import Point2D, Rectangle, Vector2D


class TestPoint2D:
    """Test Point2D."""

    def test_length(self):
        """Length is the Euclidean norm."""
        assert Vector2D(x=3.0, y=4.0).length == 5.0

    def test_distance_to(self):
        """Distance between two points."""
        assert Point2D(x=1.0, y=1.0).distance_to(Point2D(x=4.0, y=5.0)) == 5.0

    def test_frozen(self):
        """Points are immutable."""
        p = Point2D(x=1.0, y=2.0)
        with pytest.raises(ValidationError):
            p.x = 5.0


class TestRectangle:
    """Test Rectangle geometry and overlap."""

    def test_edges(self):
        """Edges derive from position and size."""
        rect = Rectangle(x=100.0, y=200.0, width=32.0, height=46.0)
        assert rect.left == 100.0
        assert rect.right == 132.0
        assert rect.top == 200.0
        assert rect.bottom == 246.0

    @pytest.mark.parametrize('width,height', [(0, 10), (10, 0), (-1, 10)])
    def test_rejects_non_positive_size(self, width, height):
        """Width and height must be positive."""
        with pytest.raises(ValidationError):
            Rectangle(x=0.0, y=0.0, width=width, height=height)

    def test_identical_rectangles_overlap(self):
        a = Rectangle(x=350.0, y=550.0, width=32.0, height=46.0)
        assert a.overlaps(a)

    def test_partial_overlap(self):
        a = Rectangle(x=0.0, y=0.0, width=32.0, height=46.0)
        b = Rectangle(x=31.0, y=45.0, width=32.0, height=46.0)
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_touching_edges_do_not_overlap(self):
        """Sharing an edge is not an overlap."""
        a = Rectangle(x=0.0, y=0.0, width=32.0, height=46.0)
        right = Rectangle(x=32.0, y=0.0, width=32.0, height=46.0)
        below = Rectangle(x=0.0, y=46.0, width=32.0, height=46.0)
        assert not a.overlaps(right)
        assert not a.overlaps(below)

    def test_overlap_needs_both_axes(self):
        """Intersecting on x alone is not enough."""
        a = Rectangle(x=0.0, y=0.0, width=32.0, height=46.0)
        b = Rectangle(x=10.0, y=100.0, width=32.0, height=46.0)
        assert not a.overlaps(b)
