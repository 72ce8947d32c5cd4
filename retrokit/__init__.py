"""Engine parts for retro side-scrolling games: config, trig, archives, input, palettes, players, objects and mods."""

__version__ = "1.3.2"

__all__ = [
    "datafile",
    "ini",
    "input",
    "mods",
    "objects",
    "palette",
    "player",
    "trig",
]