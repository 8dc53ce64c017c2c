# sustained/easing.py

"""
Easing curves for the view morph and the optional zoom emphasis.
"""


def ease_in_out_expo(t):
    """
    Exponential ease-in-out built from two mirrored 2^x halves.
    Slow at both ends, fastest through t = 0.5 where both halves equal 0.5.
    """
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    if t < 0.5:
        return 0.5 * 2 ** (30 * t - 15)
    return 1 - 0.5 * 2 ** (-30 * t + 15)


def ease_zoom(t):
    """
    Inverse ease ("ease-out-in"): fast at both ends, slow in the middle.
    The two halves are renormalised so the curve hits exactly 0, 0.5 and 1.
    """
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    tail = 2 ** -10
    if t < 0.5:
        return 0.5 * (1 - 2 ** (-20 * t)) / (1 - tail)
    return 0.5 + 0.5 * (2 ** (20 * (t - 1)) - tail) / (1 - tail)
