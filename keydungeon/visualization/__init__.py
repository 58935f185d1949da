"""
Visualization Module
====================

Text previews of generated dungeons.
"""

from keydungeon.visualization.ascii_map import render_ascii

__all__ = ['render_ascii']
