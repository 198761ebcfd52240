"""Domain-dependent utility functions for sgfrecord.

This module is designed to be used with 'from sgfrecord_common import *'.

Points here are pairs (x, y) of 0-based SGF coordinates, where (0, 0) is the
point written as 'aa' in SGF (the upper left). They are not GTP-style
(row, col) coordinates.

"""

__all__ = ["colour_letter", "format_point", "format_point_list"]

def colour_letter(colour):
    """Return the SGF property letter for a colour.

    colour -- 'b' or 'w'

    Returns 'B' or 'W'.

    """
    return {'b': 'B', 'w': 'W'}[colour]

def format_point(point):
    """Return a point as a string like '[3,15]', or 'pass'.

    point -- pair (x, y), or None for a pass

    """
    if point is None:
        return "pass"
    x, y = point
    return "[%d,%d]" % (x, y)

def format_point_list(l):
    """Return a list of points as a string like '[0,0] [3,15]'."""
    return " ".join(map(format_point, l))
