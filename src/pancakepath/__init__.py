"""PancakePath - Prepare freehand vector artwork for pancake printing.

PancakePath takes hand-drawn vector shapes and normalizes them into geometry a
pancake printer can follow: overlaps are carved away in draw order, features
too thin to pour are removed, and every color is snapped onto the batter
shade palette.

Example:
    $ pancakepath process drawing.svg --thin 2 --outline

This will create drawing-processed.svg with non-overlapping shapes colored
with the nearest pancake shade and a darker outline around every fill.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
