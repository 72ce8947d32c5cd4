"""Reading and writing of packed, encrypted ``.rsdk`` data archives.

An archive starts with a header: a 32-bit header size, a 16-bit directory
count and, for each directory, its name (XOR-masked with the inverted name
length) and the offset of its first file relative to the end of the header.
Each directory's files follow one another in the data section as an
inverted name, a 32-bit size and the encrypted contents. Every file is
encrypted with a stream keyed on its own size.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, Mapping, Optional, Union

__all__ = [
    "CipherState",
    "decrypt",
    "encrypt",
    "build_archive",
    "ArchiveEntry",
    "RSDKArchive",
    "VirtualFile",
]

_KEY_A = b"4RaS9D7KaEbxcp2o5r6t"
_KEY_B = b"3tRaUxLmEaSn"
_ENCODING = "latin-1"


def _swap_nybbles(value: int) -> int:
    return ((value & 0x0F) << 4) | (value >> 4)


@dataclass
class CipherState:
    """Position within the key stream used to encrypt one archived file."""

    string_no: int
    pos_a: int
    pos_b: int
    nybble_swap: bool = False

    @classmethod
    def for_size(cls, file_size: int) -> "CipherState":
        """The state at the first byte of a file of ``file_size`` bytes."""
        string_no = (file_size & 0x1FC) >> 2
        pos_b = string_no % 9 + 1
        pos_a = string_no % pos_b + 1
        return cls(string_no, pos_a, pos_b, False)

    def advance(self) -> None:
        """Move the key stream on by one byte."""
        self.pos_a += 1
        self.pos_b += 1
        if self.pos_a <= 19 or self.pos_b <= 11:
            if self.pos_a > 19:
                self.pos_a = 1
                self.nybble_swap = not self.nybble_swap
            if self.pos_b > 11:
                self.pos_b = 1
                self.nybble_swap = not self.nybble_swap
        else:
            self.string_no = (self.string_no + 1) & 0x7F
            if self.nybble_swap:
                self.nybble_swap = False
                self.pos_a = self.string_no % 12 + 6
                self.pos_b = self.string_no % 5 + 4
            else:
                self.nybble_swap = True
                self.pos_a = self.string_no % 15 + 3
                self.pos_b = self.string_no % 7 + 1

    def skip(self, count: int) -> None:
        """Move the key stream on by ``count`` bytes."""
        for _ in range(count):
            self.advance()

    def _decrypt_byte(self, value: int) -> int:
        data = value ^ _KEY_B[self.pos_b] ^ self.string_no
        if self.nybble_swap:
            data = _swap_nybbles(data)
        data ^= _KEY_A[self.pos_a]
        self.advance()
        return data & 0xFF

    def _encrypt_byte(self, value: int) -> int:
        data = value ^ _KEY_A[self.pos_a]
        if self.nybble_swap:
            data = _swap_nybbles(data)
        data ^= _KEY_B[self.pos_b] ^ self.string_no
        self.advance()
        return data & 0xFF


def decrypt(data: bytes, file_size: Optional[int] = None) -> bytes:
    """Decrypt a whole archived file; ``file_size`` defaults to ``len(data)``."""
    state = CipherState.for_size(len(data) if file_size is None else file_size)
    return bytes(state._decrypt_byte(b) for b in data)


def encrypt(data: bytes, file_size: Optional[int] = None) -> bytes:
    """Encrypt a whole file for an archive; ``file_size`` defaults to ``len(data)``."""
    state = CipherState.for_size(len(data) if file_size is None else file_size)
    return bytes(state._encrypt_byte(b) for b in data)


def _split_path(file_path: str) -> tuple[str, str]:
    cut = file_path.rfind("/") + 1
    return file_path[:cut], file_path[cut:]


def _encode_name(name: str) -> bytes:
    raw = name.encode(_ENCODING)
    if len(raw) > 0xFF:
        raise ValueError(f"name too long for an archive: {name!r}")
    return raw


def build_archive(files: Mapping[str, bytes]) -> bytes:
    """Pack ``{path: contents}`` into archive bytes, grouping by directory."""
    directories: dict[str, list[tuple[str, bytes]]] = {}
    for path, contents in files.items():
        dir_name, name = _split_path(path)
        directories.setdefault(dir_name, []).append((name, bytes(contents)))

    if len(directories) > 0xFFFF:
        raise ValueError("too many directories for an archive")

    table: list[tuple[bytes, int]] = []
    data = bytearray()
    for dir_name, entries in directories.items():
        table.append((_encode_name(dir_name), len(data)))
        for name, contents in entries:
            raw_name = _encode_name(name)
            data.append(len(raw_name))
            data += bytes(b ^ 0xFF for b in raw_name)
            data += len(contents).to_bytes(4, "little")
            data += encrypt(contents)

    header_size = 6 + sum(1 + len(raw) + 4 for raw, _ in table)
    header = bytearray(header_size.to_bytes(4, "little"))
    header += len(table).to_bytes(2, "little")
    for raw, offset in table:
        mask = 0xFF ^ len(raw)
        header.append(len(raw))
        header += bytes(b ^ mask for b in raw)
        header += offset.to_bytes(4, "little")
    return bytes(header + data)


def _read_exact(handle: BinaryIO, count: int) -> bytes:
    chunk = handle.read(count)
    if len(chunk) != count:
        raise ValueError("archive is truncated")
    return chunk


def _read_u32(handle: BinaryIO) -> int:
    return int.from_bytes(_read_exact(handle, 4), "little")


@dataclass(frozen=True)
class ArchiveEntry:
    """Where one file's encrypted contents live inside an archive."""

    path: str
    offset: int
    size: int


class VirtualFile:
    """A decrypting, seekable reader over one archived file."""

    def __init__(self, entry: ArchiveEntry, raw: bytes) -> None:
        self.entry = entry
        self._raw = raw
        self._position = 0
        self._state = CipherState.for_size(entry.size)

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all remaining if negative)."""
        remaining = max(self.entry.size - self._position, 0)
        count = remaining if size is None or size < 0 else min(size, remaining)
        chunk = self._raw[self._position:self._position + count]
        self._position += count
        return bytes(self._state._decrypt_byte(b) for b in chunk)

    def seek(self, position: int) -> int:
        """Move to ``position`` bytes from the start of the file."""
        if position < 0:
            raise ValueError("negative seek position")
        self._state = CipherState.for_size(self.entry.size)
        self._state.skip(min(position, self.entry.size))
        self._position = position
        return position

    def tell(self) -> int:
        """The current position from the start of the file."""
        return self._position

    def eof(self) -> bool:
        """Whether the whole file has been read."""
        return self._position >= self.entry.size


class RSDKArchive:
    """A packed data archive on disk."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = os.fspath(path)
        self._size = os.stat(self.path).st_size
        self._directories: list[tuple[str, int]] = []
        with open(self.path, "rb") as handle:
            self._header_size = _read_u32(handle)
            count = int.from_bytes(_read_exact(handle, 2), "little")
            for _ in range(count):
                length = _read_exact(handle, 1)[0]
                mask = 0xFF ^ length
                name = bytes(b ^ mask for b in _read_exact(handle, length))
                offset = _read_u32(handle)
                self._directories.append((name.decode(_ENCODING), offset))

    def find(self, file_path: str) -> Optional[ArchiveEntry]:
        """Locate ``file_path`` (case-insensitively); None if it is not stored."""
        dir_name, name = _split_path(file_path)
        wanted_dir = dir_name.lower()
        wanted_name = name.lower()
        for index, (stored_dir, offset) in enumerate(self._directories):
            if stored_dir.lower() == wanted_dir:
                break
        else:
            return None

        if index == len(self._directories) - 1:
            end = self._size
        else:
            end = self._header_size + self._directories[index + 1][1]

        position = self._header_size + offset
        with open(self.path, "rb") as handle:
            handle.seek(position)
            while True:
                length = _read_exact(handle, 1)[0]
                stored = bytes(b ^ 0xFF for b in _read_exact(handle, length)).decode(_ENCODING)
                size = _read_u32(handle)
                position += 1 + length + 4
                if stored.lower() == wanted_name:
                    # A match whose data starts at the directory's end is not reachable.
                    if position >= end:
                        return None
                    return ArchiveEntry(stored_dir + stored, position, size)
                position += size
                if position >= end:
                    return None
                handle.seek(position)

    def open(self, file_path: str) -> VirtualFile:
        """Open an archived file for reading; raises FileNotFoundError if absent."""
        entry = self.find(file_path)
        if entry is None:
            raise FileNotFoundError(file_path)
        with open(self.path, "rb") as handle:
            handle.seek(entry.offset)
            raw = _read_exact(handle, entry.size)
        return VirtualFile(entry, raw)

    def read(self, file_path: str) -> bytes:
        """Return the decrypted contents of an archived file."""
        return self.open(file_path).read()

    def __contains__(self, file_path: object) -> bool:
        return isinstance(file_path, str) and self.find(file_path) is not None