"""Scale mapper: fit a trajectory's extent into the drawing surface.

Physical coordinates have their origin at the bottom-left of the drawable
area with y pointing up. Surface coordinates have their origin at the
top-left of the widget with y pointing down. The drawable area is the
surface minus a fixed padding that leaves room for axis labels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_PIXELS_PER_METER = 2.0
MAX_PIXELS_PER_METER = 20.0

# Headroom added around the physical extent
EXTENT_PADDING = 1.1

# Physical extent used when the range or apex height is zero (m)
DEFAULT_EXTENT = 10.0


@dataclass(frozen=True)
class Padding:
    """Surface margins around the drawable area, in pixels."""

    top: float = 40.0
    right: float = 40.0
    bottom: float = 60.0
    left: float = 60.0


DEFAULT_PADDING = Padding()


def fit_scale(
    range_m: float,
    max_height_m: float,
    drawable_width: float,
    drawable_height: float,
) -> float:
    """Pixels per meter that fit range x height into the drawable area.

    Each extent gets 10% headroom; the smaller of the two axis scales is
    used so neither axis overflows, then the result is clamped to
    [MIN_PIXELS_PER_METER, MAX_PIXELS_PER_METER].
    """
    extent_x = range_m if range_m > 0 else DEFAULT_EXTENT
    extent_y = max_height_m if max_height_m > 0 else DEFAULT_EXTENT

    scale_x = drawable_width / (extent_x * EXTENT_PADDING)
    scale_y = drawable_height / (extent_y * EXTENT_PADDING)

    scale = min(scale_x, scale_y, MAX_PIXELS_PER_METER)
    return max(scale, MIN_PIXELS_PER_METER)


@dataclass(frozen=True)
class ViewTransform:
    """Affine physical -> surface map.

    Attributes:
        pixels_per_meter: Uniform scale for both axes.
        origin_x: Surface x of the physical origin (pixels).
        origin_y: Surface y of the physical origin, i.e. the ground line.
    """

    pixels_per_meter: float
    origin_x: float
    origin_y: float

    def to_surface(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.origin_x + x * self.pixels_per_meter,
            self.origin_y - y * self.pixels_per_meter,
        )

    def to_physical(self, sx: float, sy: float) -> tuple[float, float]:
        return (
            (sx - self.origin_x) / self.pixels_per_meter,
            (self.origin_y - sy) / self.pixels_per_meter,
        )


def build_transform(
    range_m: float,
    max_height_m: float,
    surface_width: float,
    surface_height: float,
    padding: Padding = DEFAULT_PADDING,
) -> ViewTransform:
    """Fit the given extent into a surface of the given size."""
    drawable_w = surface_width - padding.left - padding.right
    drawable_h = surface_height - padding.top - padding.bottom
    scale = fit_scale(range_m, max_height_m, drawable_w, drawable_h)
    logger.debug(
        "Scale %.2f px/m for extent %.1f x %.1f m in %dx%d",
        scale, range_m, max_height_m, surface_width, surface_height,
    )
    return ViewTransform(
        pixels_per_meter=scale,
        origin_x=padding.left,
        origin_y=surface_height - padding.bottom,
    )


def grid_spacing(pixels_per_meter: float) -> float:
    """Grid line spacing in meters for a given zoom level."""
    if pixels_per_meter > 15:
        return 2.0
    if pixels_per_meter < 3:
        return 20.0
    if pixels_per_meter < 5:
        return 10.0
    return 5.0
