import pytest

from retrokit.ini import ConfigItem, IniParser, ItemType


SAMPLE = "\n".join(
    [
        "# a comment line",
        "Global=yes",
        "[Game]",
        "Language=0",
        "; ignored",
        "DevMenu=true",
        "[Window]",
        "WindowScale=2",
        "Refresh=59.5",
    ]
)


def test_parse_sections_and_keys():
    ini = IniParser.parse(SAMPLE)
    assert ini.get_string("", "Global") == "yes"
    assert ini.get_integer("Game", "Language") == 0
    assert ini.get_bool("Game", "DevMenu") is True
    assert ini.get_integer("Window", "WindowScale") == 2
    assert ini.get_float("Window", "Refresh") == 59.5


def test_comments_are_not_items():
    ini = IniParser.parse(SAMPLE)
    assert [item.key for item in ini.items] == [
        "Global",
        "Language",
        "DevMenu",
        "WindowScale",
        "Refresh",
    ]


def test_has_section_flags():
    ini = IniParser.parse(SAMPLE)
    assert ini.items[0].has_section is False
    assert ini.items[1].has_section is True
    assert ini.items[1].section == "Game"


def test_missing_key_returns_default():
    ini = IniParser.parse(SAMPLE)
    assert ini.get_string("Game", "Nope") is None
    assert ini.get_integer("Game", "Nope", 7) == 7
    assert ini.get_bool("Other", "DevMenu", False) is False
    assert ini.get_float("Game", "Nope", 1.25) == 1.25


def test_key_lookup_is_scoped_to_section():
    ini = IniParser.parse("[A]\nx=1\n[B]\nx=2\n")
    assert ini.get_integer("A", "x") == 1
    assert ini.get_integer("B", "x") == 2
    assert ini.get_integer("", "x") is None


def test_value_whitespace_after_equals_is_skipped():
    ini = IniParser.parse("name=   Sonic\tignored\n")
    assert ini.get_string("", "name") == "Sonic"


def test_spaces_before_equals_stay_in_key():
    ini = IniParser.parse("name = Tails\n")
    assert ini.get_string("", "name ") == "Tails"
    assert ini.get_string("", "name") is None


def test_crlf_lines():
    ini = IniParser.parse("[Game]\r\nLanguage=3\r\n")
    assert ini.get_integer("Game", "Language") == 3


def test_lines_without_value_are_skipped():
    ini = IniParser.parse("empty=\nalso\n=novalue\n")
    assert ini.items == []


@pytest.mark.parametrize(
    "raw,expected",
    [("TRUE", True), ("True", True), ("1", True), ("yes", False), ("0", False)],
)
def test_get_bool(raw, expected):
    ini = IniParser.parse(f"flag={raw}\n")
    assert ini.get_bool("", "flag") is expected


@pytest.mark.parametrize("raw,expected", [("12abc", 12), (" -5", -5), ("abc", 0), ("+9", 9)])
def test_get_integer_reads_leading_digits(raw, expected):
    ini = IniParser.parse(f"n={raw}\n")
    assert ini.get_integer("", "n") == expected


@pytest.mark.parametrize("raw,expected", [("1.5", 1.5), ("2e3x", 2000.0), ("x", 0.0), ("-.25", -0.25)])
def test_get_float_reads_leading_number(raw, expected):
    ini = IniParser.parse(f"f={raw}\n")
    assert ini.get_float("", "f") == expected


def test_set_replaces_existing_item():
    ini = IniParser.parse("[Game]\nLanguage=0\n")
    ini.set_integer("Game", "Language", 4)
    assert len(ini.items) == 1
    assert ini.get_integer("Game", "Language") == 4
    assert ini.items[0].type == ItemType.INT


def test_set_appends_new_item():
    ini = IniParser()
    ini.set_string("Dev", "DataFile", "Data.rsdk")
    ini.set_bool("Dev", "DevMenu", True)
    assert ini.items == [
        ConfigItem("Dev", "DataFile", "Data.rsdk", False, ItemType.STRING),
        ConfigItem("Dev", "DevMenu", "true", False, ItemType.BOOL),
    ]


def test_set_float_formats_six_decimals():
    ini = IniParser()
    ini.set_float("Audio", "Volume", 1.5)
    assert ini.get_string("Audio", "Volume") == "1.500000"
    assert ini.get_float("Audio", "Volume") == 1.5


def test_set_bool_false_value():
    ini = IniParser()
    ini.set_bool("mods", "MyMod", False)
    assert ini.get_string("mods", "MyMod") == "false"
    assert ini.get_bool("mods", "MyMod") is False


def test_dumps_layout():
    ini = IniParser()
    ini.set_string("", "top", "1")
    ini.set_bool("mods", "A", True)
    ini.set_comment("mods", "note", "hello")
    ini.set_integer("Game", "Language", 2)
    text = ini.dumps()
    assert text == "top=1\n\n[mods]\nA=true\n; hello\n\n[Game]\nLanguage=2\n"


def test_dumps_groups_interleaved_sections():
    ini = IniParser()
    ini.set_string("A", "x", "1")
    ini.set_string("B", "y", "2")
    ini.set_string("A", "z", "3")
    text = ini.dumps()
    assert text.count("[A]") == 1
    assert text.count("[B]") == 1
    assert text.index("z=3") < text.index("[B]")


def test_round_trip_through_text():
    ini = IniParser()
    ini.set_string("Game", "Name", "Retro")
    ini.set_integer("Game", "Language", 1)
    ini.set_bool("Window", "FullScreen", False)
    ini.set_float("Window", "Scale", 2.0)
    again = IniParser.parse(ini.dumps())
    assert again.get_string("Game", "Name") == "Retro"
    assert again.get_integer("Game", "Language") == 1
    assert again.get_bool("Window", "FullScreen") is False
    assert again.get_float("Window", "Scale") == 2.0


def test_write_and_load(tmp_path):
    path = tmp_path / "settings.ini"
    ini = IniParser()
    ini.set_bool("mods", "Folder", True)
    ini.write(path)
    loaded = IniParser.load(path)
    assert loaded.get_bool("mods", "Folder") is True
    assert path.read_text(encoding="utf-8") == ini.dumps()


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        IniParser.load(tmp_path / "missing.ini")