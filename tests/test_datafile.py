import pytest

from retrokit.datafile import (
    ArchiveEntry,
    CipherState,
    RSDKArchive,
    build_archive,
    decrypt,
    encrypt,
)

FILES = {
    "Data/Game/GameConfig.bin": b"game config contents" * 7,
    "Data/Game/SystemText.gif": bytes(range(256)) * 3,
    "Data/Palettes/MasterPalette.act": bytes(768),
    "Data/Scripts/ByteCode/GlobalCode.bin": b"\x01\x02\x03",
}


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "Data.rsdk"
    path.write_bytes(build_archive(FILES))
    return RSDKArchive(path)


def test_for_size_zero_starts_at_first_key_positions():
    state = CipherState.for_size(0)
    assert (state.string_no, state.pos_a, state.pos_b, state.nybble_swap) == (0, 1, 1, False)


@pytest.mark.parametrize("size", [0, 5, 100, 0x1FC, 12345])
def test_for_size_depends_only_on_masked_bits(size):
    assert CipherState.for_size(size) == CipherState.for_size(size + 0x200)
    assert CipherState.for_size(size) == CipherState.for_size(size | 3)


@pytest.mark.parametrize("size", [0, 7, 0x1FC, 999])
def test_advance_keeps_positions_within_keys(size):
    state = CipherState.for_size(size)
    for _ in range(5000):
        state.advance()
        assert 1 <= state.pos_a <= 19
        assert 1 <= state.pos_b <= 11
        assert 0 <= state.string_no <= 0x7F


def test_skip_matches_repeated_advance():
    stepped = CipherState.for_size(321)
    for _ in range(777):
        stepped.advance()
    skipped = CipherState.for_size(321)
    skipped.skip(777)
    assert skipped == stepped


def test_first_byte_uses_key_characters():
    assert encrypt(b"\x00", 0) == bytes([ord("t") ^ ord("R")])
    assert decrypt(bytes([ord("t") ^ ord("R")]), 0) == b"\x00"


@pytest.mark.parametrize("data", [b"", b"a", bytes(range(256)) * 4, b"hello world" * 50])
def test_encrypt_decrypt_round_trip(data):
    assert decrypt(encrypt(data)) == data


def test_encrypt_scrambles_data():
    data = bytes(512)
    encrypted = encrypt(data)
    assert len(encrypted) == len(data)
    assert encrypted != data
    assert decrypt(encrypted, len(data)) == data


def test_archive_header_layout():
    blob = build_archive({"Data/a.bin": b"x", "Other/b.bin": b"y"})
    assert blob[4:6] == (2).to_bytes(2, "little")
    length = blob[6]
    assert length == len("Data/")
    mask = 0xFF ^ length
    assert bytes(b ^ mask for b in blob[7:7 + length]) == b"Data/"
    assert blob[7 + length:11 + length] == (0).to_bytes(4, "little")


def test_archive_round_trip(archive):
    for path, contents in FILES.items():
        assert archive.read(path) == contents


def test_find_reports_size_and_path(archive):
    entry = archive.find("Data/Palettes/MasterPalette.act")
    assert isinstance(entry, ArchiveEntry)
    assert entry.size == 768
    assert entry.path == "Data/Palettes/MasterPalette.act"


def test_lookup_ignores_case(archive):
    assert archive.read("data/game/gameconfig.BIN") == FILES["Data/Game/GameConfig.bin"]


def test_contains(archive):
    assert "Data/Game/SystemText.gif" in archive
    assert "Data/Game/Missing.gif" not in archive
    assert "Data/Nowhere/GameConfig.bin" not in archive


def test_missing_file_raises(archive):
    assert archive.find("Data/Game/Missing.bin") is None
    with pytest.raises(FileNotFoundError):
        archive.open("Data/Game/Missing.bin")


def test_missing_archive_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        RSDKArchive(tmp_path / "absent.rsdk")


def test_truncated_archive_raises(tmp_path):
    path = tmp_path / "cut.rsdk"
    path.write_bytes(build_archive(FILES)[:3])
    with pytest.raises(ValueError):
        RSDKArchive(path)


def test_name_too_long_rejected():
    with pytest.raises(ValueError):
        build_archive({"Data/" + "x" * 300: b"1"})


def test_empty_file_before_another(tmp_path):
    path = tmp_path / "e.rsdk"
    path.write_bytes(build_archive({"Data/empty.bin": b"", "Data/full.bin": b"abc"}))
    arc = RSDKArchive(path)
    assert arc.read("Data/empty.bin") == b""
    assert arc.read("Data/full.bin") == b"abc"


def test_virtual_file_partial_reads(archive):
    contents = FILES["Data/Game/SystemText.gif"]
    handle = archive.open("Data/Game/SystemText.gif")
    assert handle.read(10) == contents[:10]
    assert handle.tell() == 10
    assert handle.read(100) == contents[10:110]
    assert not handle.eof()
    assert handle.read() == contents[110:]
    assert handle.eof()
    assert handle.read(5) == b""


def test_virtual_file_seek(archive):
    contents = FILES["Data/Game/GameConfig.bin"]
    handle = archive.open("Data/Game/GameConfig.bin")
    handle.read(50)
    assert handle.seek(17) == 17
    assert handle.read(20) == contents[17:37]
    handle.seek(0)
    assert handle.read() == contents


def test_virtual_file_seek_past_end(archive):
    handle = archive.open("Data/Scripts/ByteCode/GlobalCode.bin")
    handle.seek(50)
    assert handle.eof()
    assert handle.read() == b""


def test_virtual_file_negative_seek(archive):
    handle = archive.open("Data/Scripts/ByteCode/GlobalCode.bin")
    with pytest.raises(ValueError):
        handle.seek(-1)