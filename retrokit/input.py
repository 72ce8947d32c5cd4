"""Keyboard, controller and touch input state for the engine's eight buttons."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Container, Iterable, Optional

__all__ = [
    "HAPTIC_NONE",
    "HAPTIC_STOP",
    "Button",
    "ControllerButton",
    "InputData",
    "InputButton",
    "Deadzones",
    "axis_delta",
    "ControllerState",
    "InputManager",
]

HAPTIC_NONE = -2
HAPTIC_STOP = -1


class Button(enum.IntEnum):
    """The engine's logical buttons; ANY is set while any other one is held."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    A = 4
    B = 5
    C = 6
    START = 7
    ANY = 8


BUTTON_COUNT = len(Button)


class ControllerButton(enum.IntEnum):
    """Game-controller buttons, plus stick directions and triggers treated as buttons."""

    A = 0
    B = 1
    X = 2
    Y = 3
    BACK = 4
    GUIDE = 5
    START = 6
    LEFT_STICK = 7
    RIGHT_STICK = 8
    LEFT_SHOULDER = 9
    RIGHT_SHOULDER = 10
    DPAD_UP = 11
    DPAD_DOWN = 12
    DPAD_LEFT = 13
    DPAD_RIGHT = 14
    MAX = 15
    ZL = 16
    ZR = 17
    LSTICK_UP = 18
    LSTICK_DOWN = 19
    LSTICK_LEFT = 20
    LSTICK_RIGHT = 21
    RSTICK_UP = 22
    RSTICK_DOWN = 23
    RSTICK_LEFT = 24
    RSTICK_RIGHT = 25
    MAX_EXTRA = 26


@dataclass
class InputData:
    """A snapshot of the eight buttons, either as 'pressed this frame' or 'held'."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    a: bool = False
    b: bool = False
    c: bool = False
    start: bool = False


@dataclass
class InputButton:
    """One logical button: its press/hold state and its key and controller mappings."""

    press: bool = False
    hold: bool = False
    key_mapping: Optional[int] = None
    controller_mapping: Optional[int] = None

    def set_held(self) -> None:
        """Mark the button held; it counts as pressed only on the first frame."""
        self.press = not self.hold
        self.hold = True

    def set_released(self) -> None:
        """Mark the button neither pressed nor held."""
        self.press = False
        self.hold = False

    def down(self) -> bool:
        """Whether the button is pressed or held."""
        return self.press or self.hold


@dataclass
class Deadzones:
    """Analogue thresholds, as fractions of full deflection."""

    left_stick: float = 0.3
    right_stick: float = 0.3
    left_trigger: float = 0.3
    right_trigger: float = 0.3


def _normalize(value: float, low: float, high: float) -> float:
    return (float(value) - float(low)) / (float(high) - float(low))


def axis_delta(axis: int) -> float:
    """Map a signed 16-bit stick axis onto the range -1.0 to 1.0."""
    if axis < 0:
        return -_normalize(-axis, 1, 32768)
    return _normalize(axis, 0, 32767)


@dataclass
class ControllerState:
    """The current buttons and axes of one game controller."""

    buttons: set = field(default_factory=set)
    left_x: int = 0
    left_y: int = 0
    right_x: int = 0
    right_y: int = 0
    trigger_left: int = 0
    trigger_right: int = 0

    def is_pressed(self, button: int, deadzones: Optional[Deadzones] = None) -> bool:
        """Whether ``button`` counts as pressed, including stick and trigger directions."""
        dz = deadzones if deadzones is not None else Deadzones()
        if button in self.buttons:
            return True

        left_x = axis_delta(self.left_x)
        left_y = axis_delta(self.left_y)
        right_x = axis_delta(self.right_x)
        right_y = axis_delta(self.right_y)

        if button == ControllerButton.DPAD_UP:
            return left_y < -dz.left_stick
        if button == ControllerButton.DPAD_DOWN:
            return left_y > dz.left_stick
        if button == ControllerButton.DPAD_LEFT:
            return left_x < -dz.left_stick
        if button == ControllerButton.DPAD_RIGHT:
            return left_x > dz.left_stick
        if button == ControllerButton.ZL:
            return _normalize(self.trigger_left, 0, 32767) > dz.left_trigger
        if button == ControllerButton.ZR:
            return _normalize(self.trigger_right, 0, 32767) > dz.right_trigger
        if button == ControllerButton.LSTICK_UP:
            return left_y < -dz.left_stick
        if button == ControllerButton.LSTICK_DOWN:
            return left_y > dz.left_stick
        # The horizontal stick "buttons" are deliberately mirrored.
        if button == ControllerButton.LSTICK_LEFT:
            return left_x > dz.left_stick
        if button == ControllerButton.LSTICK_RIGHT:
            return left_x < -dz.left_stick
        if button == ControllerButton.RSTICK_UP:
            return right_y < -dz.right_stick
        if button == ControllerButton.RSTICK_DOWN:
            return right_y > dz.right_stick
        if button == ControllerButton.RSTICK_LEFT:
            return right_x > dz.right_stick
        if button == ControllerButton.RSTICK_RIGHT:
            return right_x < -dz.right_stick
        return False


_FLAG_FIELDS = (
    (0x01, "up", Button.UP),
    (0x02, "down", Button.DOWN),
    (0x04, "left", Button.LEFT),
    (0x08, "right", Button.RIGHT),
    (0x10, "a", Button.A),
    (0x20, "b", Button.B),
    (0x40, "c", Button.C),
    (0x80, "start", Button.START),
)


class InputManager:
    """Tracks the logical buttons from keyboard or controllers, plus touches and haptics."""

    def __init__(self) -> None:
        self.buttons: list[InputButton] = [InputButton() for _ in range(BUTTON_COUNT)]
        self.input_type = 0
        self.deadzones = Deadzones()
        self.touch_down: list[bool] = []
        self.any_press = False
        self.dim_timer = 0
        self.dim_limit = 0
        self.master_paused = False
        self.haptics_enabled = True
        self.haptic_effect_num = HAPTIC_NONE

    def _controller_pressed(self, button: Optional[int], controllers: list) -> bool:
        if button is None:
            return False
        return any(c.is_pressed(button, self.deadzones) for c in controllers)

    def process(self, keyboard: Container[int], controllers: Iterable[ControllerState] = ()) -> None:
        """Update every button from the pressed key codes and the controllers' states."""
        controllers = list(controllers)
        any_button = self.buttons[Button.ANY]

        def key_down(mapping: Optional[int]) -> bool:
            return mapping is not None and mapping in keyboard

        if self.input_type in (0, 1):
            for button in self.buttons[:Button.ANY]:
                if self.input_type == 0:
                    active = key_down(button.key_mapping)
                else:
                    active = self._controller_pressed(button.controller_mapping, controllers)
                if active:
                    button.set_held()
                    if not any_button.hold:
                        any_button.set_held()
                elif button.hold:
                    button.set_released()

        if any(key_down(button.key_mapping) for button in self.buttons):
            self.input_type = 0
        elif self.input_type == 0:
            any_button.set_released()

        if any(self._controller_pressed(b, controllers) for b in range(ControllerButton.MAX)):
            self.input_type = 1
        elif self.input_type == 1:
            any_button.set_released()

        if any_button.press or any_button.hold or len(self.touch_down) > 1:
            self.dim_timer = 0
        elif self.dim_timer < self.dim_limit and not self.master_paused:
            self.dim_timer += 1

    def check_key_press(self, data: InputData, flags: int) -> InputData:
        """Copy 'pressed this frame' into the fields of ``data`` selected by ``flags``."""
        for bit, name, button in _FLAG_FIELDS:
            if flags & bit:
                setattr(data, name, self.buttons[button].press)
        if flags & 0x80:
            self.any_press = self.buttons[Button.ANY].press or any(self.touch_down)
        return data

    def check_key_down(self, data: InputData, flags: int) -> InputData:
        """Copy 'held' into the fields of ``data`` selected by ``flags``."""
        for bit, name, button in _FLAG_FIELDS:
            if flags & bit:
                setattr(data, name, self.buttons[button].hold)
        return data

    def queue_haptic(self, haptic_id: int) -> None:
        """Queue a haptic effect if haptics are enabled."""
        if self.haptics_enabled:
            self.haptic_effect_num = haptic_id

    def take_haptic(self) -> int:
        """Return the queued haptic effect and clear the queue."""
        num = self.haptic_effect_num
        self.haptic_effect_num = HAPTIC_NONE
        return num