"""Tests for projectile/scale.py: viewport fitting and coordinate mapping."""

import pytest

from projectile.scale import (
    MIN_PIXELS_PER_METER, MAX_PIXELS_PER_METER, DEFAULT_EXTENT,
    Padding, ViewTransform, fit_scale, build_transform, grid_spacing,
)


class TestFitScale:
    """Test the fit_scale function."""

    def test_limited_by_width(self):
        scale = fit_scale(63.7, 15.9, 1000, 500)
        assert scale == pytest.approx(1000 / (63.7 * 1.1))

    def test_limited_by_height(self):
        scale = fit_scale(20.0, 40.0, 1000, 500)
        assert scale == pytest.approx(500 / (40.0 * 1.1))

    @pytest.mark.parametrize("range_m,height_m,w,h", [
        (0.0, 0.0, 700, 500),
        (0.0, 0.0, 10, 10),
        (1e6, 1e6, 700, 500),
        (1e-4, 1e-4, 700, 500),
        (500.0, 0.0, 700, 500),
        (0.0, 300.0, 700, 500),
        (50.0, 20.0, -20, -40),
    ])
    def test_always_clamped(self, range_m, height_m, w, h):
        scale = fit_scale(range_m, height_m, w, h)
        assert MIN_PIXELS_PER_METER <= scale <= MAX_PIXELS_PER_METER

    def test_degenerate_extent_uses_default(self):
        """A zero range falls back to DEFAULT_EXTENT before padding."""
        scale = fit_scale(0.0, 1000.0, 60, 100_000)
        assert scale == pytest.approx(60 / (DEFAULT_EXTENT * 1.1))

    def test_tiny_extent_hits_max_zoom(self):
        assert fit_scale(0.5, 0.5, 700, 500) == MAX_PIXELS_PER_METER

    def test_huge_extent_hits_min_zoom(self):
        assert fit_scale(5000, 2000, 700, 500) == MIN_PIXELS_PER_METER


class TestViewTransform:
    """Test physical to surface mapping."""

    def test_origin_bottom_left_of_drawable(self):
        tf = build_transform(60.0, 15.0, 800, 600)
        assert tf.to_surface(0.0, 0.0) == (60.0, 540.0)

    def test_y_axis_inverted(self):
        tf = ViewTransform(pixels_per_meter=10.0, origin_x=60.0, origin_y=540.0)
        sx, sy = tf.to_surface(5.0, 3.0)
        assert sx == 110.0
        assert sy == 510.0

    def test_to_physical_inverts(self):
        tf = ViewTransform(pixels_per_meter=7.5, origin_x=60.0, origin_y=540.0)
        x, y = tf.to_physical(*tf.to_surface(12.25, 4.5))
        assert x == pytest.approx(12.25)
        assert y == pytest.approx(4.5)

    def test_custom_padding(self):
        pad = Padding(top=10, right=10, bottom=20, left=30)
        tf = build_transform(10.0, 10.0, 400, 300, padding=pad)
        assert (tf.origin_x, tf.origin_y) == (30, 280)

    def test_fits_landing_point_inside_surface(self):
        tf = build_transform(63.7, 15.9, 800, 600)
        sx, sy = tf.to_surface(63.7, 15.9)
        assert 60 <= sx <= 800 - 40
        assert 40 <= sy <= 540


class TestGridSpacing:
    """Test grid spacing tiers."""

    @pytest.mark.parametrize("scale,expected", [
        (20.0, 2.0),
        (15.5, 2.0),
        (15.0, 5.0),
        (10.0, 5.0),
        (5.0, 5.0),
        (4.0, 10.0),
        (3.0, 10.0),
        (2.5, 20.0),
        (2.0, 20.0),
    ])
    def test_tiers(self, scale, expected):
        assert grid_spacing(scale) == expected
