"""
Scene Stitcher - Snap Engine

Edge snapping for a scene rectangle being dragged on the layout canvas.
Pure function of its inputs; the canvas owns the rectangles and guides.
"""

from models.scene import SnapGuide
from constants import SNAP_THRESHOLD


def compute_snap(drag_index, new_x, new_y, rects, zoom,
                 suppress=False, snap_x=True, snap_y=True,
                 threshold=SNAP_THRESHOLD):
    """Correct a proposed position so nearby edges line up exactly.

    For every other rectangle, four cases are tested per enabled axis:
        X: left->other.right, right->other.left, left->left, right->right
        Y: top->other.bottom, bottom->other.top, top->top, bottom->bottom
    A case matches when the edges are closer than threshold / zoom world
    pixels, so the snap distance feels the same at every zoom level.

    Later matches overwrite earlier ones on the same axis: the last
    qualifying rectangle in list order wins. Each match adds a guide.

    Args:
        drag_index: Index of the moving rectangle in rects
        new_x, new_y: Proposed top-left position in world space
        rects: All rectangles (objects with x, y, width, height)
        zoom: Current viewport zoom
        suppress: Skip snapping entirely (Shift held)
        snap_x, snap_y: Per-axis enable flags
        threshold: Snap distance in screen pixels

    Returns:
        (x, y, guides): corrected position and list of SnapGuide
    """
    if suppress or (not snap_x and not snap_y):
        return new_x, new_y, []

    dragged = rects[drag_index]
    dw = dragged.width
    dh = dragged.height

    d_left = new_x
    d_right = new_x + dw
    d_top = new_y
    d_bottom = new_y + dh

    snapped_x = new_x
    snapped_y = new_y
    world_threshold = threshold / zoom
    guides = []

    for index, other in enumerate(rects):
        if index == drag_index:
            continue
        o_left = other.x
        o_right = other.x + other.width
        o_top = other.y
        o_bottom = other.y + other.height

        if snap_x:
            # Left edge -> right edge of other
            if abs(d_left - o_right) < world_threshold:
                snapped_x = o_right
                guides.append(SnapGuide('x', o_right))
            # Right edge -> left edge of other
            if abs(d_right - o_left) < world_threshold:
                snapped_x = o_left - dw
                guides.append(SnapGuide('x', o_left))
            # Left -> left
            if abs(d_left - o_left) < world_threshold:
                snapped_x = o_left
                guides.append(SnapGuide('x', o_left))
            # Right -> right
            if abs(d_right - o_right) < world_threshold:
                snapped_x = o_right - dw
                guides.append(SnapGuide('x', o_right))

        if snap_y:
            # Top edge -> bottom edge of other
            if abs(d_top - o_bottom) < world_threshold:
                snapped_y = o_bottom
                guides.append(SnapGuide('y', o_bottom))
            # Bottom edge -> top edge of other
            if abs(d_bottom - o_top) < world_threshold:
                snapped_y = o_top - dh
                guides.append(SnapGuide('y', o_top))
            # Top -> top
            if abs(d_top - o_top) < world_threshold:
                snapped_y = o_top
                guides.append(SnapGuide('y', o_top))
            # Bottom -> bottom
            if abs(d_bottom - o_bottom) < world_threshold:
                snapped_y = o_bottom - dh
                guides.append(SnapGuide('y', o_bottom))

    return snapped_x, snapped_y, guides


def next_snap_flags(mode, snap_x, snap_y):
    """Apply a toolbar snap command to the current per-axis flags.

    Args:
        mode: 'x' or 'y' toggle one axis; 'both' turns both on unless both
            are already on (then both off); 'none' turns both off
        snap_x, snap_y: Current flags

    Returns:
        (snap_x, snap_y)
    """
    if mode == 'x':
        return not snap_x, snap_y
    if mode == 'y':
        return snap_x, not snap_y
    if mode == 'both':
        if snap_x and snap_y:
            return False, False
        return True, True
    if mode == 'none':
        return False, False
    return snap_x, snap_y
