"""Tiling of panes into a near-square grid on the terminal."""

from __future__ import annotations

from .protocol import WindowDesc


def grid_shape(count: int) -> tuple[int, int]:
    """Return the (rows, columns) of the smallest grid holding ``count`` panes.

    Columns and rows grow in turn, columns first, so a grid is never more
    than one column wider than it is tall.
    """
    if count < 0:
        raise ValueError("pane count cannot be negative")
    rows = cols = 0
    while rows * cols < count:
        if cols > rows:
            rows += 1
        else:
            cols += 1
    return rows, cols


def tile(count: int, height: int, width: int) -> list[WindowDesc]:
    """Lay ``count`` equal panes over a screen, keeping the bottom line free."""
    rows, cols = grid_shape(count)
    if not count:
        return []
    cell_height = (height - 1) // rows
    cell_width = width // cols
    return [
        WindowDesc(
            y=cell_height * (index // cols),
            x=cell_width * (index % cols),
            width=cell_width,
            height=cell_height,
        )
        for index in range(count)
    ]