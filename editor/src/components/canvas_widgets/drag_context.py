"""Drag context dataclass for the layout canvas.

A single object describes the current pointer interaction instead of a set
of boolean flags. No context means the canvas is idle.
"""

from dataclasses import dataclass, field


@dataclass
class DragContext:
    """Pointer state captured at pointer-down.

    operation: 'drag' (moving a scene rectangle) or 'pan' (moving the view)
    """
    operation: str
    index: int = -1  # dragged rectangle, drag only
    start_screen: tuple = (0.0, 0.0)  # last screen point, pan only
    start_world: tuple = (0.0, 0.0)  # world point under the pointer at drag start
    origin: tuple = (0.0, 0.0)  # rectangle position at drag start
    modifiers: set = field(default_factory=set)  # {'ctrl', 'shift'}

    @property
    def is_drag(self):
        return self.operation == 'drag'

    @property
    def is_pan(self):
        return self.operation == 'pan'
