from typing import BinaryIO

import click


class ConsoleInput:
    """One byte per call from binary stdin, None once the stream is exhausted."""

    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream or click.get_binary_stream('stdin')

    def __call__(self) -> int | None:
        buf = self.stream.read(1)

        if not buf:
            return None

        return buf[0]


class ConsoleOutput:
    """Writes the low byte of each value and flushes it right away."""

    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream or click.get_binary_stream('stdout')

    def __call__(self, value: int):
        self.stream.write(bytes((value & 0xFF,)))
        self.stream.flush()


class BufferInput:
    def __init__(self, data: bytes = b''):
        self.data = data
        self.pos = 0

    def __call__(self) -> int | None:
        if self.pos >= len(self.data):
            return None

        value = self.data[self.pos]
        self.pos += 1
        return value


class BufferOutput:
    def __init__(self):
        self.buf = bytearray()
        self.values: list[int] = []

    def __call__(self, value: int):
        self.values.append(value)
        self.buf.append(value & 0xFF)

    @property
    def data(self) -> bytes:
        return bytes(self.buf)

    def text(self) -> str:
        return self.data.decode('latin-1')
