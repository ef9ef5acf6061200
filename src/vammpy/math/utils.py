import math


def clamp_num(x: int, min_clamp: int, max_clamp: int) -> int:
    return max(min_clamp, min(x, max_clamp))


def sig_num(x: int) -> int:
    return -1 if x < 0 else 1


def square_root(x: int) -> int:
    if x < 0:
        raise ValueError("cannot take the square root of a negative number")

    return math.isqrt(x)
