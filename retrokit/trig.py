"""Fixed-point trigonometry lookup tables and arc-tangent lookup."""

from __future__ import annotations

import math
import struct

__all__ = [
    "sin_m",
    "cos_m",
    "sin512",
    "cos512",
    "sin256",
    "cos256",
    "arc_tan_lookup",
]


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _build_m_tables() -> tuple[list[int], list[int]]:
    sin_table = [int(math.sin((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
    cos_table = [int(math.cos((i / 256.0) * math.pi) * 4096.0) for i in range(0x200)]
    cos_table[0x00], cos_table[0x80], cos_table[0x100], cos_table[0x180] = 0x1000, 0, -0x1000, 0
    sin_table[0x00], sin_table[0x80], sin_table[0x100], sin_table[0x180] = 0, 0x1000, 0, -0x1000
    return sin_table, cos_table


def _build_512_tables() -> tuple[list[int], list[int]]:
    sin_table = []
    cos_table = []
    for i in range(0x200):
        arg = _f32((i / 256.0) * math.pi)
        sin_table.append(int(_f32(math.sin(arg)) * 512.0))
        cos_table.append(int(_f32(math.cos(arg)) * 512.0))
    cos_table[0x00], cos_table[0x80], cos_table[0x100], cos_table[0x180] = 0x200, 0, -0x200, 0
    sin_table[0x00], sin_table[0x80], sin_table[0x100], sin_table[0x180] = 0, 0x200, 0, -0x200
    return sin_table, cos_table


def _build_arctan_table() -> bytes:
    scale = _f32(40.743664)
    # Indexed as [x * 0x100 + y].
    return bytes(
        int(_f32(_f32(math.atan2(y, x)) * scale)) & 0xFF
        for x in range(0x100)
        for y in range(0x100)
    )


_SIN_M, _COS_M = _build_m_tables()
_SIN_512, _COS_512 = _build_512_tables()
_SIN_256 = [_SIN_512[i * 2] >> 1 for i in range(0x100)]
_COS_256 = [_COS_512[i * 2] >> 1 for i in range(0x100)]
_ARC_TAN_256 = _build_arctan_table()


def _wrap(angle: int, size: int) -> int:
    if angle < 0:
        angle = size - angle
    return angle & (size - 1)


def sin_m(angle: int) -> int:
    """Sine of ``angle`` (512 steps per turn) scaled by 4096."""
    return _SIN_M[_wrap(angle, 0x200)]


def cos_m(angle: int) -> int:
    """Cosine of ``angle`` (512 steps per turn) scaled by 4096."""
    return _COS_M[_wrap(angle, 0x200)]


def sin512(angle: int) -> int:
    """Sine of ``angle`` (512 steps per turn) scaled by 512."""
    return _SIN_512[_wrap(angle, 0x200)]


def cos512(angle: int) -> int:
    """Cosine of ``angle`` (512 steps per turn) scaled by 512."""
    return _COS_512[_wrap(angle, 0x200)]


def sin256(angle: int) -> int:
    """Sine of ``angle`` (256 steps per turn) scaled by 256."""
    return _SIN_256[_wrap(angle, 0x100)]


def cos256(angle: int) -> int:
    """Cosine of ``angle`` (256 steps per turn) scaled by 256."""
    return _COS_256[_wrap(angle, 0x100)]


def arc_tan_lookup(x: int, y: int) -> int:
    """Angle of the vector (x, y) as a byte, 256 steps per turn."""
    ax = abs(x)
    ay = abs(y)
    if ax <= ay:
        while ay > 0xFF:
            ax >>= 4
            ay >>= 4
    else:
        while ax > 0xFF:
            ax >>= 4
            ay >>= 4
    value = _ARC_TAN_256[(ax << 8) + ay]
    if x <= 0:
        if y <= 0:
            return (value - 0x80) & 0xFF
        return (-0x80 - value) & 0xFF
    if y <= 0:
        return -value & 0xFF
    return value