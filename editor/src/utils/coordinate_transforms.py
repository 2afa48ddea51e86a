"""Coordinate transformation utilities for the layout canvas.

Provides conversion between the two coordinate systems:
- World space (scene pixels, zoom/pan independent, Y-down)
- Screen space (Qt widget pixels, Y-down)

The mapping is a uniform scale by the zoom level followed by a translation
by the pan offset, so both directions are exact inverses for any zoom > 0.
"""

from constants import MIN_ZOOM, MAX_ZOOM


def world_to_screen(world_x, world_y, zoom, pan_x, pan_y):
	"""Convert a world-space point to screen pixels.

	Args:
		world_x: X in scene pixels
		world_y: Y in scene pixels
		zoom: Viewport zoom level
		pan_x: Horizontal pan offset in screen pixels
		pan_y: Vertical pan offset in screen pixels

	Returns:
		(screen_x, screen_y): Qt widget pixel coordinates
	"""
	return world_x * zoom + pan_x, world_y * zoom + pan_y


def screen_to_world(screen_x, screen_y, zoom, pan_x, pan_y):
	"""Convert screen pixels to a world-space point.

	Args:
		screen_x: Qt widget X pixel coordinate
		screen_y: Qt widget Y pixel coordinate
		zoom: Viewport zoom level (always > 0)
		pan_x: Horizontal pan offset in screen pixels
		pan_y: Vertical pan offset in screen pixels

	Returns:
		(world_x, world_y): Position in scene pixels
	"""
	return (screen_x - pan_x) / zoom, (screen_y - pan_y) / zoom


def clamp_zoom(zoom):
	"""Clamp a zoom level into [MIN_ZOOM, MAX_ZOOM]."""
	return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def pan_for_anchored_zoom(anchor_x, anchor_y, pan_x, pan_y, old_zoom, new_zoom):
	"""Compute the pan that keeps the world point under an anchor fixed.

	pan' = anchor - (anchor - pan) * (new_zoom / old_zoom)

	Args:
		anchor_x, anchor_y: Screen point that must stay over the same world point
		pan_x, pan_y: Current pan offset
		old_zoom: Zoom level before the change
		new_zoom: Zoom level after the change

	Returns:
		(new_pan_x, new_pan_y)
	"""
	ratio = new_zoom / old_zoom
	return (anchor_x - (anchor_x - pan_x) * ratio,
	        anchor_y - (anchor_y - pan_y) * ratio)
