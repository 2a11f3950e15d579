"""Models of page, buddy and slab allocators, interrupt dispatch, keyboard, terminal and disk devices, plus sperf, pstree and plcs tools."""

__version__ = "0.1.0"