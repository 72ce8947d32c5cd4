# retrokit

Building blocks for a retro side-scrolling game engine. The package is plain
Python and uses only the standard library.

## Modules

- `retrokit.ini`: `IniParser`, an ordered INI reader and writer. Build one
  with `IniParser.parse(text)` or `IniParser.load(path)`. Read values with
  `get_string`, `get_integer`, `get_float` and `get_bool`. Each takes a
  section, a key and a default that is returned when the key is missing.
  Change values with `set_string`, `set_integer`, `set_float`, `set_bool` and
  `set_comment`. Render with `dumps()` or save with `write(path)`. Items are
  `ConfigItem` dataclasses, and each is tagged with an `ItemType`.
- `retrokit.trig`: fixed-point lookup trigonometry. `sin_m` and `cos_m` are
  scaled by 4096, `sin512` and `cos512` by 512 (512 steps per turn), and
  `sin256` and `cos256` by 256 (256 steps per turn). `arc_tan_lookup(x, y)`
  returns the angle of a vector as a byte.
- `retrokit.datafile`: packed, encrypted `.rsdk` data archives.
  `RSDKArchive(path)` offers `find`, `open`, `read` and `in`. Lookups ignore
  case. `open` returns a `VirtualFile` with `read`, `seek`, `tell` and `eof`.
  The stream cipher is available through `CipherState`, `encrypt` and
  `decrypt`. `build_archive({path: bytes})` packs files into archive bytes.
- `retrokit.input`: `InputManager` tracks the eight logical buttons (see
  `Button`) and the `ANY` button, from key codes or from `ControllerState`
  objects. It applies `Deadzones` to the sticks and triggers. It also
  provides `check_key_press` and `check_key_down` into `InputData`, a
  screen-dim timer, and haptic queueing with `queue_haptic` and
  `take_haptic`.
- `retrokit.palette`: `PaletteBank` holds eight 256-colour palettes. It packs
  colours as RGB565 or RGB5551 depending on its `RenderType`, and selects
  palettes per screen line. It offers `set_entry`, `copy_palette`, `rotate`,
  `set_fade`, `set_limited_fade` and `load_act` for raw RGB triplets.
- `retrokit.player`: the `Player` dataclass, `ControlMode`, and
  `ControlBuffers`. `ControlBuffers.process` feeds a player from
  `InputData`, or replays the input history 16 frames behind for a
  sidekick.
- `retrokit.objects`: the `Entity` dataclass, `ObjectPriority`, and
  `normalize_type_name`. `check_active` tests whether an entity runs this
  frame for a given scroll position. It blanks a `BOUNDS_DESTROY` entity
  that has left the area.
- `retrokit.mods`: `ModManager(base_path)` works on `<base_path>/mods`.
  - `init_mods` scans the folder. Mods listed in `modconfig.ini` come first.
  - `load_mod` reads each mod's `mod.ini` into a `ModInfo`.
  - `scan_mod_folder` maps the mod's `Data/`, `Scripts/` and `Videos/`
    replacement files.
  - `save` writes `modconfig.ini`.
  - `flags` combines the active mods' settings into `ModFlags`.
  - `resolve_file` returns the replacement path for a game file.

  The module also provides `resolve_path`, which looks up a path's last
  component without regard to case, and `get_scene_id`.

## Example

```python
from retrokit.ini import IniParser
from retrokit.trig import sin512, cos256, arc_tan_lookup

config = IniParser.parse("[Game]\nLanguage=0\nDevMenu=true\n")
print(config.get_integer("Game", "Language", 0))   # 0
print(config.get_bool("Game", "DevMenu", False))   # True

config.set_float("Window", "Scale", 2.0)
print(config.dumps())

print(sin512(0x80))           # 512
print(cos256(0))              # 256
print(arc_tan_lookup(1, 0))   # 0
```

Reading from a data archive:

```python
from retrokit.datafile import RSDKArchive, build_archive

blob = build_archive({"Data/Game/GameConfig.bin": b"\x00\x01\x02"})
with open("Data.rsdk", "wb") as fh:
    fh.write(blob)

archive = RSDKArchive("Data.rsdk")
print("Data/Game/GameConfig.bin" in archive)        # True
print(archive.read("Data/Game/GameConfig.bin"))     # b'\x00\x01\x02'
```

## What it does not do

This is a library of engine parts, not a game that can be run.

- There is no command to start.
- Nothing draws to the screen or plays sound.
- There is no game loop, scene loader or script interpreter.
- Input is not read from devices. You pass the pressed key codes and
  controller states to `InputManager.process`.

## Tests

```
pip install -e .[test]
pytest
```