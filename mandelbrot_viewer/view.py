"""
View state and pixel <-> complex-plane transforms.

A ViewState is the affine map from pixel space to the complex plane:

    cr = px / zoom + offset_x
    ci = py / zoom + offset_y

so (offset_x, offset_y) is the complex coordinate of pixel (0, 0) and zoom
is the number of pixels per complex-plane unit. Every operation returns a
new ViewState; nothing here mutates.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ViewState:
    """Pan/zoom parameters of the viewport. zoom is always > 0."""

    zoom: float
    offset_x: float
    offset_y: float

    def __post_init__(self):
        if not self.zoom > 0:
            raise ValueError(f"zoom must be > 0, got {self.zoom}")


def pixel_to_complex(px, py, view):
    """Map pixel coordinates to (cr, ci) in the complex plane."""
    return px / view.zoom + view.offset_x, py / view.zoom + view.offset_y


def complex_to_pixel(cr, ci, view):
    """Inverse of pixel_to_complex."""
    return (cr - view.offset_x) * view.zoom, (ci - view.offset_y) * view.zoom


def screen_center(view, width, height):
    """Complex-plane point currently shown at the middle of the viewport."""
    return pixel_to_complex(width / 2.0, height / 2.0, view)


def pan(view, dx, dy):
    """
    Pan by a distance given in screen pixels.

    The world-space delta is d / zoom, so a fixed number of pixels per tick
    feels like the same speed at every zoom level.
    """
    return replace(
        view,
        offset_x=view.offset_x + dx / view.zoom,
        offset_y=view.offset_y + dy / view.zoom,
    )


def zoom_centered(view, factor, width, height):
    """
    Multiply zoom by factor, keeping the point at the viewport center fixed.

    factor > 1 zooms in, factor < 1 zooms out.

    Raises:
        ValueError if factor is not > 0
    """
    if not factor > 0:
        raise ValueError(f"zoom factor must be > 0, got {factor}")

    cx = width / 2.0
    cy = height / 2.0
    center_re, center_im = pixel_to_complex(cx, cy, view)

    zoom = view.zoom * factor
    return ViewState(
        zoom=zoom,
        offset_x=center_re - cx / zoom,
        offset_y=center_im - cy / zoom,
    )


# Named operations used by the input layer

def pan_left(view, speed):
    return pan(view, -speed, 0.0)


def pan_right(view, speed):
    return pan(view, speed, 0.0)


def pan_up(view, speed):
    return pan(view, 0.0, -speed)


def pan_down(view, speed):
    return pan(view, 0.0, speed)


def zoom_in(view, factor, width, height):
    return zoom_centered(view, factor, width, height)


def zoom_out(view, factor, width, height):
    return zoom_centered(view, 1.0 / factor, width, height)
