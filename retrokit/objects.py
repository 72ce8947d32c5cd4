"""Object entities, their activity priorities and object type names."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from retrokit.palette import SCREEN_YSIZE

__all__ = [
    "ENTITY_COUNT",
    "TEMPENTITY_START",
    "OBJECT_COUNT",
    "OBJ_TYPE_BLANKOBJECT",
    "OBJECT_BORDER_X1",
    "OBJECT_BORDER_X2",
    "OBJECT_BORDER_Y1",
    "OBJECT_BORDER_Y2",
    "ObjectPriority",
    "Entity",
    "normalize_type_name",
    "check_active",
]

ENTITY_COUNT = 0x4A0
TEMPENTITY_START = ENTITY_COUNT - 0x80
OBJECT_COUNT = 0x100
OBJ_TYPE_BLANKOBJECT = 0

OBJECT_BORDER_X1 = 0x80
OBJECT_BORDER_X2 = 0
OBJECT_BORDER_Y1 = 0x100
OBJECT_BORDER_Y2 = SCREEN_YSIZE + 0x100


class ObjectPriority(enum.IntEnum):
    """When an entity is processed."""

    BOUNDS = 0
    ACTIVE = 1
    ALWAYS = 2
    XBOUNDS = 3
    BOUNDS_DESTROY = 4
    INACTIVE = 5


@dataclass
class Entity:
    """One object instance in the scene; positions are 16.16 fixed point."""

    x_pos: int = 0
    y_pos: int = 0
    values: list[int] = field(default_factory=lambda: [0] * 8)
    scale: int = 0
    rotation: int = 0
    animation_timer: int = 0
    animation_speed: int = 0
    type: int = OBJ_TYPE_BLANKOBJECT
    property_value: int = 0
    state: int = 0
    priority: int = ObjectPriority.BOUNDS
    draw_order: int = 0
    direction: int = 0
    ink_effect: int = 0
    alpha: int = 0
    animation: int = 0
    prev_animation: int = 0
    frame: int = 0


def normalize_type_name(name: str) -> str:
    """Object type names are stored with their spaces removed."""
    return name.replace(" ", "")


def check_active(
    entity: Entity,
    x_scroll_offset: int,
    y_scroll_offset: int,
    border_x1: int = OBJECT_BORDER_X1,
    border_x2: int = OBJECT_BORDER_X2,
    border_y1: int = OBJECT_BORDER_Y1,
    border_y2: int = OBJECT_BORDER_Y2,
) -> bool:
    """Whether ``entity`` runs this frame; a BOUNDS_DESTROY entity out of range is blanked."""
    priority = entity.priority
    x = entity.x_pos >> 16
    y = entity.y_pos >> 16
    in_x = x_scroll_offset - border_x1 < x < border_x2 + x_scroll_offset
    in_y = y_scroll_offset - border_y1 < y < y_scroll_offset + border_y2

    if priority == ObjectPriority.BOUNDS:
        return in_x and in_y
    if priority in (ObjectPriority.ACTIVE, ObjectPriority.ALWAYS):
        return True
    if priority == ObjectPriority.XBOUNDS:
        return in_x
    if priority == ObjectPriority.BOUNDS_DESTROY:
        if in_x and in_y:
            return True
        entity.type = OBJ_TYPE_BLANKOBJECT
        return False
    return False