"""Render surface: draw a projectile scene on any 2D backend.

render_scene() is a pure function of a Scene; it knows nothing about
physics or timing. Backends implement the DrawingSurface protocol
(the Qt widget adapts QPainter, tests use a recorder).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from projectile.scale import DEFAULT_PADDING, Padding, ViewTransform, grid_spacing

RGBA = tuple[int, int, int, int]
Point = tuple[float, float]


@dataclass(frozen=True)
class Palette:
    background: RGBA = (248, 253, 255, 255)
    grid: RGBA = (224, 224, 224, 255)
    axis: RGBA = (192, 192, 192, 255)
    text: RGBA = (51, 51, 51, 255)
    ground: RGBA = (139, 195, 74, 255)
    trajectory: RGBA = (45, 156, 219, 255)
    preview: RGBA = (45, 156, 219, 77)
    projectile: RGBA = (26, 95, 122, 255)
    projectile_shadow: RGBA = (0, 0, 0, 51)
    projectile_highlight: RGBA = (255, 255, 255, 102)
    launcher: RGBA = (69, 90, 100, 255)
    launcher_base: RGBA = (96, 125, 139, 255)
    probe: RGBA = (255, 112, 67, 255)


DEFAULT_PALETTE = Palette()

PROJECTILE_RADIUS = 10.0
LAUNCHER_LENGTH = 40.0
LAUNCHER_HEAD = 12.0
LAUNCHER_BASE_RADIUS = 12.0
GROUND_THICKNESS = 5.0


class DrawingSurface(Protocol):
    """Minimal immediate-mode 2D drawing contract (surface pixels)."""

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        ...

    def line(self, x0: float, y0: float, x1: float, y1: float,
             color: RGBA, width: float = 1.0) -> None:
        ...

    def polyline(self, points: Sequence[Point], color: RGBA,
                 width: float = 1.0, dashed: bool = False) -> None:
        ...

    def circle(self, cx: float, cy: float, radius: float, color: RGBA) -> None:
        ...

    def polygon(self, points: Sequence[Point], color: RGBA) -> None:
        ...

    def text(self, x: float, y: float, text: str, color: RGBA,
             size: float = 10.0, rotation: float = 0.0) -> None:
        ...


@dataclass(frozen=True)
class Scene:
    """Everything needed to draw one frame.

    Attributes:
        width, height: Surface size in pixels.
        transform: Physical -> surface map.
        launch_angle: Launcher orientation (degrees).
        initial_height: Launcher height (m).
        preview_points: Dashed ghost path, drawn when not empty.
        run_points: Solid run path, drawn up to drawn_up_to.
        drawn_up_to: Last run sample index already passed.
        projectile: Projectile position (m), or None to hide it.
        probe: Hover marker position (m), or None.
    """

    width: float
    height: float
    transform: ViewTransform
    launch_angle: float
    initial_height: float
    preview_points: tuple = ()
    run_points: tuple = ()
    drawn_up_to: int = -1
    projectile: Point | None = None
    probe: Point | None = None
    padding: Padding = DEFAULT_PADDING
    palette: Palette = DEFAULT_PALETTE


def _format_meters(value: float) -> str:
    return f"{value:g}m"


def draw_grid(surface: DrawingSurface, scene: Scene) -> None:
    """Grid lines every grid_spacing() meters with labels and axes."""
    pal, pad, tf = scene.palette, scene.padding, scene.transform
    spacing = grid_spacing(tf.pixels_per_meter)
    step_px = spacing * tf.pixels_per_meter
    left, right = pad.left, scene.width - pad.right
    top, bottom = pad.top, scene.height - pad.bottom
    label_every_line = spacing >= 10

    i = 0
    while left + i * step_px <= right:
        x = left + i * step_px
        surface.line(x, top, x, bottom, pal.grid, 0.5)
        if label_every_line or i % 2 == 0:
            surface.text(x - 10, bottom + 20, _format_meters(i * spacing), pal.text)
        i += 1

    i = 0
    while bottom - i * step_px >= top:
        y = bottom - i * step_px
        surface.line(left, y, right, y, pal.grid, 0.5)
        if label_every_line or i % 2 == 0:
            surface.text(left - 30, y + 4, _format_meters(i * spacing), pal.text)
        i += 1

    surface.line(left, bottom, right, bottom, pal.axis, 2.0)
    surface.line(left, top, left, bottom, pal.axis, 2.0)

    surface.text(scene.width / 2, scene.height - 10, "Distance (m)", pal.text, 12.0)
    surface.text(15, scene.height / 2, "Height (m)", pal.text, 12.0, rotation=-90.0)


def draw_ground(surface: DrawingSurface, scene: Scene) -> None:
    pad = scene.padding
    surface.fill_rect(
        pad.left, scene.height - pad.bottom,
        scene.width - pad.left - pad.right, GROUND_THICKNESS,
        scene.palette.ground,
    )


def draw_path(surface: DrawingSurface, scene: Scene, points, color: RGBA,
              width: float, dashed: bool = False) -> None:
    tf = scene.transform
    px = [tf.to_surface(p[0], p[1]) for p in points]
    if len(px) >= 2:
        surface.polyline(px, color, width, dashed)


def draw_launcher(surface: DrawingSurface, scene: Scene) -> None:
    """Barrel pointing along the launch angle, with arrow head and base."""
    pal = scene.palette
    bx, by = scene.transform.to_surface(0.0, scene.initial_height)
    a = math.radians(scene.launch_angle)
    ex = bx + math.cos(a) * LAUNCHER_LENGTH
    ey = by - math.sin(a) * LAUNCHER_LENGTH

    surface.line(bx, by, ex, ey, pal.launcher, 8.0)
    surface.polygon(
        [
            (ex, ey),
            (ex - LAUNCHER_HEAD * math.cos(a - 0.4), ey + LAUNCHER_HEAD * math.sin(a - 0.4)),
            (ex - LAUNCHER_HEAD * math.cos(a + 0.4), ey + LAUNCHER_HEAD * math.sin(a + 0.4)),
        ],
        pal.launcher,
    )
    surface.circle(bx, by, LAUNCHER_BASE_RADIUS, pal.launcher_base)


def draw_projectile(surface: DrawingSurface, scene: Scene, x: float, y: float) -> None:
    pal = scene.palette
    cx, cy = scene.transform.to_surface(x, max(0.0, y))
    surface.circle(cx + 2, cy + 2, PROJECTILE_RADIUS, pal.projectile_shadow)
    surface.circle(cx, cy, PROJECTILE_RADIUS, pal.projectile)
    surface.circle(cx - 3, cy - 3, 4.0, pal.projectile_highlight)


def draw_probe(surface: DrawingSurface, scene: Scene, x: float, y: float) -> None:
    cx, cy = scene.transform.to_surface(x, max(0.0, y))
    surface.circle(cx, cy, 5.0, scene.palette.probe)


def render_scene(surface: DrawingSurface, scene: Scene) -> None:
    """Draw background, grid, ground, paths, launcher, projectile, probe."""
    surface.fill_rect(0, 0, scene.width, scene.height, scene.palette.background)
    draw_grid(surface, scene)
    draw_ground(surface, scene)

    if scene.preview_points:
        draw_path(surface, scene, scene.preview_points,
                  scene.palette.preview, 2.0, dashed=True)

    if scene.run_points and scene.drawn_up_to >= 0:
        passed = list(scene.run_points[:scene.drawn_up_to + 1])
        # Join the path to the exact projectile position between samples
        if scene.projectile is not None:
            passed.append(scene.projectile)
        draw_path(surface, scene, passed, scene.palette.trajectory, 3.0)

    draw_launcher(surface, scene)

    if scene.projectile is not None:
        draw_projectile(surface, scene, *scene.projectile)
    if scene.probe is not None:
        draw_probe(surface, scene, *scene.probe)
