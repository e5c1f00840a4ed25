# meshedit/vecmath.py
from __future__ import annotations

import math
from typing import Iterable, Tuple

Vec3 = Tuple[float, float, float]


# -----------------------------
# Small vector utilities
# -----------------------------

def vec3(p: Iterable[float]) -> Vec3:
    x, y, z = p
    return (float(x), float(y), float(z))


def v_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def v_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def v_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def v_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def v_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def v_len(a: Vec3) -> float:
    return math.sqrt(v_dot(a, a))


def v_dist(a: Vec3, b: Vec3) -> float:
    return v_len(v_sub(a, b))


def v_norm(a: Vec3) -> Vec3:
    l = v_len(a)
    if l == 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / l, a[1] / l, a[2] / l)


def v_mean(points: Iterable[Vec3]) -> Vec3:
    sx = sy = sz = 0.0
    n = 0
    for x, y, z in points:
        sx += x
        sy += y
        sz += z
        n += 1
    if n == 0:
        raise ValueError("mean of an empty point set")
    return (sx / n, sy / n, sz / n)


def is_finite_vec(a: Vec3) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1]) and math.isfinite(a[2])
