"""Discovery, configuration and file redirection for user-installed mods."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from retrokit.ini import IniParser

__all__ = [
    "PLAYERNAME_COUNT",
    "ModInfo",
    "ModFlags",
    "resolve_path",
    "get_scene_id",
    "ModManager",
]

PLAYERNAME_COUNT = 0x10

_log = logging.getLogger(__name__)

_REPLACEMENT_FOLDERS = ("Data", "Scripts", "Videos")


@dataclass
class ModInfo:
    """What a mod's ``mod.ini`` declares and which game files it replaces."""

    name: str = ""
    desc: str = ""
    author: str = ""
    version: str = ""
    file_map: dict[str, str] = field(default_factory=dict)
    folder: str = ""
    use_scripts: bool = False
    disable_focus_pause: int = 0
    redirect_save: bool = False
    disable_save_ini_override: bool = False
    save_path: str = ""
    active: bool = False


@dataclass
class ModFlags:
    """Engine settings that follow from the set of active mods."""

    force_use_scripts: bool = False
    disable_focus_pause: int = 0
    redirect_save: bool = False
    save_path: str = ""
    disable_save_ini_override: bool = False


def resolve_path(path: Union[str, os.PathLike]) -> Path:
    """Find ``path`` with its last component matched case-insensitively.

    A relative path is taken from the current directory. If nothing in the
    parent directory matches, the (absolute) path is returned unchanged.
    """
    given = Path(path)
    if not given.is_absolute():
        given = Path.cwd() / given
    wanted = given.name.lower()
    try:
        for candidate in given.parent.iterdir():
            if candidate.name.lower() == wanted:
                return candidate
    except OSError:
        pass
    return given


def _strip_spaces(text: str) -> str:
    return text.replace(" ", "")


def get_scene_id(stage_names: Sequence[Sequence[str]], list_id: int, scene_name: str) -> int:
    """Index of ``scene_name`` in stage list ``list_id``, ignoring spaces; -1 if absent."""
    if list_id < 0 or list_id >= 3 or list_id >= len(stage_names):
        return -1
    wanted = _strip_spaces(scene_name).lower()
    for index, name in enumerate(stage_names[list_id]):
        if _strip_spaces(name).lower() == wanted:
            return index
    return -1


class ModManager:
    """The mods installed under ``<base_path>/mods`` and their combined effects."""

    def __init__(self, base_path: Union[str, os.PathLike]) -> None:
        self.base_path = Path(base_path)
        self.mods: list[ModInfo] = []
        self.force_use_scripts_config = False
        self.disable_focus_pause_config = 0

    @property
    def mods_path(self) -> Path:
        """The mods directory, matched case-insensitively."""
        return resolve_path(self.base_path / "mods")

    def init_mods(self) -> list[ModInfo]:
        """Rebuild the mod list: configured mods first, then any other mod folders."""
        self.mods = []
        mods_path = self.mods_path
        if not mods_path.is_dir():
            return self.mods

        config_path = mods_path / "modconfig.ini"
        if config_path.is_file():
            config = IniParser.load(config_path)
            for item in config.items:
                active = config.get_bool("mods", item.key, False)
                info = self.load_mod(item.key, active)
                if info is not None:
                    self.mods.append(info)

        try:
            entries = sorted(mods_path.iterdir())
        except OSError as error:
            _log.warning("Mods folder scanning error: %s", error)
            entries = []
        for entry in entries:
            if not entry.is_dir():
                continue
            if any(mod.folder == entry.name for mod in self.mods):
                continue
            info = self.load_mod(entry.name, False)
            if info is not None:
                self.mods.append(info)
        return self.mods

    def load_mod(self, folder: str, active: bool) -> Optional[ModInfo]:
        """Read ``mods/<folder>/mod.ini``; None if the folder has no such file."""
        mod_dir = self.mods_path / folder
        ini_path = mod_dir / "mod.ini"
        if not ini_path.is_file():
            return None
        settings = IniParser.load(ini_path)

        info = ModInfo(
            name="Unnamed Mod",
            desc="",
            author="Unknown Author",
            version="1.0.0",
            folder=folder,
            active=bool(active),
        )
        for attr, key in (("name", "Name"), ("desc", "Description"),
                          ("author", "Author"), ("version", "Version")):
            value = settings.get_string("", key, "")
            if value:
                setattr(info, attr, value)

        self.scan_mod_folder(info)

        info.use_scripts = settings.get_bool("", "TxtScripts", False)
        info.disable_focus_pause = settings.get_integer("", "DisableFocusPause", 0)
        info.redirect_save = settings.get_bool("", "RedirectSaveRAM", False)
        if info.redirect_save:
            info.save_path = f"mods/{folder}/"
        info.disable_save_ini_override = settings.get_bool("", "DisableSaveIniOverride", False)
        return info

    def scan_mod_folder(self, info: ModInfo) -> dict[str, str]:
        """Add the mod's Data, Scripts and Videos replacement files to its file map."""
        mod_dir = self.mods_path / info.folder
        for sub in _REPLACEMENT_FOLDERS:
            root = resolve_path(mod_dir / sub)
            if not root.is_dir():
                continue
            tokens = (f"{sub}/", f"{sub}\\", f"{sub.lower()}/", f"{sub.lower()}\\")
            try:
                files = sorted(p for p in root.rglob("*") if p.is_file())
            except OSError as error:
                _log.warning("%s folder scanning error: %s", sub, error)
                continue
            for file_path in files:
                full = str(file_path)
                position = -1
                for token in tokens:
                    position = full.find(token)
                    if position >= 0:
                        break
                if position < 0:
                    continue
                key = full[position:].replace("\\", "/").lower()
                info.file_map.setdefault(key, full)
        return info.file_map

    def save(self) -> None:
        """Write each mod's active state to ``mods/modconfig.ini``."""
        mods_path = self.mods_path
        if not mods_path.is_dir():
            return
        config = IniParser()
        for info in self.mods:
            config.set_bool("mods", info.folder, info.active)
        config.write(mods_path / "modconfig.ini")

    def flags(self) -> ModFlags:
        """The engine settings implied by the configured defaults and the active mods."""
        result = ModFlags(
            force_use_scripts=self.force_use_scripts_config,
            disable_focus_pause=self.disable_focus_pause_config,
        )
        for info in self.mods:
            if not info.active:
                continue
            if info.use_scripts:
                result.force_use_scripts = True
            if info.disable_focus_pause:
                result.disable_focus_pause |= info.disable_focus_pause
            if info.redirect_save:
                result.save_path = info.save_path
                result.redirect_save = True
            if info.disable_save_ini_override:
                result.disable_save_ini_override = True
        return result

    def resolve_file(self, file_path: str, active_mod: Optional[int] = None) -> Optional[str]:
        """The path a mod substitutes for ``file_path``, or None to use the game's own.

        With ``active_mod`` given, only that mod is consulted. Text scripts
        under ``Data/Scripts/`` are redirected to ``Scripts/`` when any active
        mod (or the configuration) forces script use.
        """
        key = file_path.lower()
        if active_mod is not None and active_mod != -1:
            candidates = self.mods[active_mod:active_mod + 1]
        else:
            candidates = self.mods
        for info in candidates:
            if info.active and key in info.file_map:
                return info.file_map[key]

        if (
            self.flags().force_use_scripts
            and file_path.startswith("Data/Scripts/")
            and file_path.endswith("txt")
        ):
            return file_path[len("Data/"):]
        return None