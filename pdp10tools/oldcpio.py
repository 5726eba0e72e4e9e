"""List and extract old cpio archives stored on SIMH tape images."""

from __future__ import annotations

import os
import re
import sys
import time
from typing import BinaryIO, Optional, TextIO

RECORD_SIZE = 5120
_ERROR_FLAG = 0x80000000
_MAGIC = 0o70707


class TapeImageError(ValueError):
    """Raised when a record's trailing length does not match its header."""


def make_parents(path) -> None:
    """Create every directory leading up to the last component of ``path``."""
    text = os.fspath(path)
    for i, c in enumerate(text):
        if c == "/":
            try:
                os.mkdir(text[:i], 0o700)
            except OSError:
                pass


def _read_octal(data: bytes) -> int:
    text = data.split(b"\0", 1)[0].decode("latin-1")
    match = re.match(r"\s*([+-]?)([0-7]*)", text)
    if not match or not match.group(2):
        return 0
    value = int(match.group(2), 8)
    if match.group(1) == "-":
        value = -value
    return value & 0xFFFFFFFF


class CpioReader:
    """Reads cpio headers and file data from a tape image."""

    def __init__(
        self, stream: BinaryIO, out: Optional[TextIO] = None, extract: bool = False
    ) -> None:
        self.stream = stream
        self.out = sys.stdout if out is None else out
        self.extract = extract
        self._data = bytearray()
        self._base = 0
        self._pos = 0

    def _say(self, text: str) -> None:
        self.out.write(text + "\n")

    def _frames(self, n: int) -> bytes:
        chunk = self.stream.read(n)
        if len(chunk) < n:
            raise EOFError("Physical end of tape.")
        return chunk

    def _size(self) -> int:
        return int.from_bytes(self._frames(4), "little")

    def _record(self) -> tuple[int, bytes]:
        size = self._size()
        if size & _ERROR_FLAG or size == 0:
            return size, b""
        data = self._frames(size)
        if self._size() != size:
            raise TapeImageError("Error in image.")
        return size, data

    def _fill(self) -> None:
        marks = 0
        while True:
            size, data = self._record()
            if size == 0:
                marks += 1
                self._say("Tape mark.")
                if marks == 2:
                    self._say("Logical end of tape.")
            elif size & _ERROR_FLAG:
                marks = 0
                self._say("Tape error.")
            else:
                self._data += data
                return

    def _available(self) -> int:
        return self._base + len(self._data) - self._pos

    def _peek(self, n: int) -> bytes:
        if self._pos > self._base:
            del self._data[: self._pos - self._base]
            self._base = self._pos
        while len(self._data) < n:
            self._fill()
        return bytes(self._data[:n])

    def _take(self, n: int) -> bytes:
        data = self._peek(n)
        self._pos += n
        return data

    def _skip(self, n: int) -> None:
        if n > 0:
            self._take(n)

    def _open(self, name: str, mode: int):
        path = name[1:] if name.startswith("/") else name
        make_parents(path)
        if mode & 0o40000:
            try:
                os.mkdir(path, mode & 0o777)
            except OSError:
                pass
            return None, path
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode & 0o777)
        except OSError:
            return None, path
        return os.fdopen(fd, "wb"), path

    def read_file(self) -> Optional[str]:
        """Read one archive member; return its name, or None for a trailer.

        Raises EOFError at the physical end of the tape.
        """
        while True:
            header = self._peek(100)
            if int.from_bytes(header[0:2], "little") == _MAGIC:

                def le16(offset: int) -> int:
                    return int.from_bytes(header[offset : offset + 2], "little")

                def le32(offset: int) -> int:
                    return (le16(offset) << 16) | le16(offset + 2)

                mode, uid, gid, links = le16(6), le16(8), le16(10), le16(12)
                mtime = le32(16)
                name_size = le16(20)
                file_size = le32(22)
                name_offset, adjust = 26, 1
                break
            if header[:6] == b"070707":
                mode = _read_octal(header[18:24])
                uid = _read_octal(header[24:30])
                gid = _read_octal(header[30:36])
                links = _read_octal(header[36:42])
                mtime = _read_octal(header[48:59])
                name_size = _read_octal(header[59:65])
                file_size = _read_octal(header[65:76])
                name_offset, adjust = 76, 0
                break
            self._say("Not a cpio record, spacing forward to next.")
            end = self._pos + 100
            self._skip(100 + (-end) % RECORD_SIZE)

        raw = self._take(name_offset + name_size)[name_offset:]
        name = raw.split(b"\0", 1)[0].decode("latin-1")

        result: Optional[str]
        if file_size == 0 and name == "TRAILER!!!":
            self._say("Saveset trailer.")
            self._skip((-self._pos) % RECORD_SIZE)
            result = None
        else:
            stamp = time.ctime(mtime)
            self._say(
                f"{mode:06o} {links:3d} {uid:5d} {gid:5d} {file_size:7d} {stamp} {name}"
            )
            target, path = self._open(name, mode) if self.extract else (None, name)

            # The file data must start on an even boundary.
            if self._pos & 1:
                self._skip(adjust)
            try:
                remaining = file_size
                while remaining:
                    chunk = self._take(min(remaining, max(self._available(), 1)))
                    remaining -= len(chunk)
                    if target is not None:
                        target.write(chunk)
            finally:
                if target is not None:
                    target.close()
            if target is not None:
                os.utime(path, (mtime, mtime))
            result = name

        # The next header must start on an even boundary.
        if self._pos & 1:
            self._skip(adjust)
        return result


def read_archive(
    stream: BinaryIO, out: Optional[TextIO] = None, extract: bool = False
) -> list[str]:
    """List (and optionally extract) every member; return the member names."""
    reader = CpioReader(stream, out, extract)
    names: list[str] = []
    try:
        while True:
            name = reader.read_file()
            if name is not None:
                names.append(name)
    except EOFError:
        reader.out.write("Physical end of tape.\n")
    return names


def main(argv=None) -> int:
    """List the archive on standard input; ``-x`` also extracts it."""
    args = sys.argv[1:] if argv is None else list(argv)
    extract = args == ["-x"]
    if extract:
        os.umask(0)
    try:
        read_archive(sys.stdin.buffer, sys.stdout, extract)
    except TapeImageError as error:
        print(error)
        return 1
    return 0