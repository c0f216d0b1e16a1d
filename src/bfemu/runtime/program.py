import logging as lg
from pathlib import Path

import bfemu.common.ops as ops


class LoadError(Exception):
    pass


class UnbalancedLoop(LoadError):
    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


class SourceUnreadable(LoadError):
    def __init__(self, path: Path):
        super().__init__(f'File "{path}" could not be opened.')
        self.path = path


class Program:
    """Loaded source text plus its loop match table.

    Every character of the source keeps its position, comments included,
    so match table indices are file offsets. Read-only once built.
    """

    symbols: str
    matches: dict[int, int]

    def __init__(self, symbols: str, matches: dict[int, int]):
        self.symbols = symbols
        self.matches = matches

    def __len__(self) -> int:
        return len(self.symbols)

    def instruction_at(self, index: int) -> str:
        if index >= len(self.symbols):
            return ops.END

        return self.symbols[index]

    def match_of(self, index: int) -> int:
        return self.matches[index]

    def brackets(self) -> list[int]:
        return sorted(self.matches)

    def location(self, index: int) -> tuple[int, int]:
        return locate(self.symbols, index)


def locate(symbols: str, index: int) -> tuple[int, int]:
    # 1-based line and column
    line = symbols.count('\n', 0, index) + 1
    column = index - symbols.rfind('\n', 0, index)
    return (line, column)


def _unbalanced(symbols: str, index: int, what: str) -> UnbalancedLoop:
    line, column = locate(symbols, index)
    return UnbalancedLoop(f'Unbalanced loop: {what} at line {line}, column {column}', index)


def build_matches(symbols: str) -> dict[int, int]:
    matches: dict[int, int] = {}
    open_loops: list[int] = []

    for index, symbol in enumerate(symbols):
        if symbol == ops.ENTER:
            open_loops.append(index)

        elif symbol == ops.EXIT:
            if not open_loops:
                raise _unbalanced(symbols, index, f"'{ops.EXIT}' without matching '{ops.ENTER}'")

            enter = open_loops.pop()
            matches[enter] = index
            matches[index] = enter

    if open_loops:
        # Report the innermost unclosed loop
        raise _unbalanced(symbols, open_loops[-1], f"'{ops.ENTER}' is never closed")

    return matches


def load(source: str | bytes) -> Program:
    if isinstance(source, bytes):
        # One position per byte
        source = source.decode('latin-1')

    matches = build_matches(source)
    lg.debug(f'Loaded {len(source)} symbols, {len(matches) // 2} loops')
    return Program(source, matches)


def load_file(filepath: str | Path) -> Program:
    if isinstance(filepath, str):
        filepath = Path(filepath)

    lg.debug(f'Loading source {filepath}')

    try:
        source = filepath.read_bytes()
    except OSError:
        raise SourceUnreadable(filepath)

    return load(source)
