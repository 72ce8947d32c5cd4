"""Colour palettes: packed 16-bit colours, palette banks, rotation and fades."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

__all__ = [
    "PALETTE_COUNT",
    "PALETTE_SIZE",
    "SCREEN_YSIZE",
    "RenderType",
    "PaletteEntry",
    "rgb888_to_rgb565",
    "rgb888_to_rgb5551",
    "PaletteBank",
]

PALETTE_COUNT = 0x8
PALETTE_SIZE = 0x100
SCREEN_YSIZE = 240


class RenderType(enum.IntEnum):
    """Whether colours are packed for the software or the hardware renderer."""

    SW = 0
    HW = 1


@dataclass
class PaletteEntry:
    """A full 24-bit colour."""

    r: int = 0
    g: int = 0
    b: int = 0


def rgb888_to_rgb565(r: int, g: int, b: int) -> int:
    """Pack a 24-bit colour as RGB565 (software renderer)."""
    return (b >> 3) | ((g >> 2) << 5) | ((r >> 3) << 11)


def rgb888_to_rgb5551(r: int, g: int, b: int) -> int:
    """Pack a 24-bit colour as RGB5551 with a clear alpha bit (hardware renderer)."""
    return ((b >> 3) << 1) | ((g >> 3) << 6) | ((r >> 3) << 11)


class PaletteBank:
    """Eight 256-colour palettes, the per-line palette selection and fade state."""

    line_count = SCREEN_YSIZE

    def __init__(self, render_type: RenderType = RenderType.SW) -> None:
        self.render_type = RenderType(render_type)
        self.full_palette: list[list[int]] = [[0] * PALETTE_SIZE for _ in range(PALETTE_COUNT)]
        self.full_palette32: list[list[PaletteEntry]] = [
            [PaletteEntry() for _ in range(PALETTE_SIZE)] for _ in range(PALETTE_COUNT)
        ]
        self.line_buffer: list[int] = [0] * self.line_count
        self.active_index = 0
        self.tex_palette_num = 0
        self.palette_mode = 0
        self.fade_mode = 0
        self.fade_r = 0
        self.fade_g = 0
        self.fade_b = 0
        self.fade_a = 0

    @property
    def active_palette(self) -> list[int]:
        """The packed colours of the active palette."""
        return self.full_palette[self.active_index]

    @property
    def active_palette32(self) -> list[PaletteEntry]:
        """The 24-bit colours of the active palette."""
        return self.full_palette32[self.active_index]

    def _pack(self, r: int, g: int, b: int) -> int:
        if self.render_type == RenderType.SW:
            return rgb888_to_rgb565(r, g, b)
        return rgb888_to_rgb5551(r, g, b)

    def set_active_palette(self, palette_id: int, start_line: int, end_line: int) -> None:
        """Select ``palette_id`` for the given screen lines (or as the texture palette)."""
        if self.render_type == RenderType.SW:
            if 0 <= palette_id < PALETTE_COUNT:
                for line in range(max(start_line, 0), min(end_line, self.line_count)):
                    self.line_buffer[line] = palette_id
            self.active_index = self.line_buffer[0]
        elif 0 <= palette_id < PALETTE_COUNT:
            self.tex_palette_num = palette_id

    def set_entry(self, palette_id: Optional[int], index: int, r: int, g: int, b: int) -> None:
        """Set one colour; a ``palette_id`` of None, -1 or 0xFF means the active palette."""
        index &= 0xFF
        r, g, b = r & 0xFF, g & 0xFF, b & 0xFF
        if palette_id is None or palette_id in (-1, 0xFF):
            target, target32 = self.active_palette, self.active_palette32
        else:
            if not 0 <= palette_id < PALETTE_COUNT:
                raise IndexError(f"palette {palette_id} out of range")
            target, target32 = self.full_palette[palette_id], self.full_palette32[palette_id]
        colour = self._pack(r, g, b)
        if self.render_type == RenderType.HW and index:
            colour |= 1
        target[index] = colour
        target32[index] = PaletteEntry(r, g, b)

    def copy_palette(self, src: int, dest: int) -> None:
        """Copy every colour of palette ``src`` into palette ``dest``."""
        if 0 <= src < PALETTE_COUNT and 0 <= dest < PALETTE_COUNT:
            self.full_palette[dest] = list(self.full_palette[src])
            self.full_palette32[dest] = [
                PaletteEntry(e.r, e.g, e.b) for e in self.full_palette32[src]
            ]

    def rotate(self, start_index: int, end_index: int, right: bool) -> None:
        """Rotate the active palette's colours between two indices by one step."""
        pal, pal32 = self.active_palette, self.active_palette32
        if start_index > end_index:
            if right:
                pal[start_index], pal32[start_index] = pal[end_index], pal32[end_index]
            else:
                pal[end_index], pal32[end_index] = pal[start_index], pal32[start_index]
            return
        span = slice(start_index, end_index + 1)
        seg, seg32 = pal[span], pal32[span]
        if right:
            pal[span] = seg[-1:] + seg[:-1]
            pal32[span] = seg32[-1:] + seg32[:-1]
        else:
            pal[span] = seg[1:] + seg[:1]
            pal32[span] = seg32[1:] + seg32[:1]

    def set_fade(self, r: int, g: int, b: int, a: int) -> None:
        """Start a full-screen fade towards a colour; alpha is capped at 0xFF."""
        self.fade_mode = 1
        self.fade_r = r & 0xFF
        self.fade_g = g & 0xFF
        self.fade_b = b & 0xFF
        self.fade_a = min(a, 0xFF)

    def set_limited_fade(
        self, palette_id: int, r: int, g: int, b: int, alpha: int, start_index: int, end_index: int
    ) -> None:
        """Blend a range of ``palette_id`` towards a colour and make it active."""
        if not 0 <= palette_id < PALETTE_COUNT:
            return
        self.palette_mode = 1
        self.active_index = palette_id
        alpha &= 0xFFFF
        if alpha >= 0x100:
            alpha = 0xFF
        if start_index >= end_index:
            return
        inverse = 0xFF - alpha
        pal, pal32 = self.active_palette, self.active_palette32

        def blend(target: int, current: int) -> int:
            return (((target * alpha + inverse * current) & 0xFFFF) >> 8) & 0xFF

        for i in range(start_index, end_index):
            entry = pal32[i]
            nr, ng, nb = blend(r, entry.r), blend(g, entry.g), blend(b, entry.b)
            pal[i] = self._pack(nr, ng, nb)
            if self.render_type == RenderType.HW:
                pal32[i] = PaletteEntry(nr, ng, nb)
                pal[i] |= 1

    def load_act(
        self,
        data: bytes,
        palette_id: int,
        start_palette_index: int,
        start_index: int,
        end_index: int,
    ) -> None:
        """Load colours ``start_index`` to ``end_index`` of raw RGB triplets into a palette."""
        needed = 3 * max(end_index, start_index)
        if len(data) < needed:
            raise ValueError("palette data is too short")
        if not 0 <= palette_id < PALETTE_COUNT:
            palette_id = 0
        target = palette_id if palette_id else -1
        dest = start_palette_index
        for i in range(start_index, end_index):
            r, g, b = data[3 * i:3 * i + 3]
            self.set_entry(target, dest, r, g, b)
            dest += 1