"""Geometry helpers for axis-aligned scene rectangles and point lists.

Rectangles are any objects exposing x, y, width, height (PlacedEntry,
LayoutEntry). None of these functions raise on empty input.
"""

import numpy as np


def rect_bounds_array(rects):
    """Stack rectangles into an (N, 4) array of [left, top, right, bottom].

    The dtype follows the input: all-integer rectangles give an int array.
    """
    return np.array(
        [[r.x, r.y, r.x + r.width, r.y + r.height] for r in rects],
    ).reshape(-1, 4)


def bounding_box(rects):
    """Union bounding box of a set of rectangles.

    Returns:
        (min_x, min_y, max_x, max_y) as Python numbers of the input type,
        or None when rects is empty
    """
    bounds = rect_bounds_array(rects)
    if bounds.shape[0] == 0:
        return None
    min_x, min_y = bounds[:, 0].min(), bounds[:, 1].min()
    max_x, max_y = bounds[:, 2].max(), bounds[:, 3].max()
    return min_x.item(), min_y.item(), max_x.item(), max_y.item()


def hit_test(rects, x, y):
    """Index of the topmost rectangle containing a world point, or -1.

    Later rectangles draw on top, so the list is searched back to front.
    Edges count as inside.
    """
    for index in range(len(rects) - 1, -1, -1):
        r = rects[index]
        if r.x <= x <= r.x + r.width and r.y <= y <= r.y + r.height:
            return index
    return -1


def translate_flat_points(points, dx, dy):
    """Translate an interleaved [x0, y0, x1, y1, ...] list.

    Even indices receive dx, odd indices dy. Integer input with integer
    offsets stays integer.

    Returns:
        New list; the input is not modified
    """
    if not points:
        return list(points or [])
    values = np.asarray(points)
    offsets = np.where(np.arange(values.size) % 2 == 0, dx, dy)
    return (values + offsets).tolist()


def fit_within(width, height, max_size):
    """Scale (width, height) so the longest side equals max_size.

    Returns:
        (scale, scaled_width, scaled_height); scale is 0 for empty input
    """
    longest = max(width, height)
    if longest <= 0:
        return 0.0, 0, 0
    scale = max_size / longest
    return scale, max(1, int(round(width * scale))), max(1, int(round(height * scale)))
