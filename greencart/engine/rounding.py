import math


def round_half_up(value: float, digits: int = 0):
    """
    Round .5 upward (towards +inf), the way the legacy dashboard figures were produced.
    digits=0 returns an int.
    """
    if digits == 0:
        return int(math.floor(value + 0.5))
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale
