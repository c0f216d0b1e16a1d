from pathlib import Path
import logging as lg
import tomllib

import bfemu.common.hwconf as hw


def is_integer(value) -> bool:
    # bool is an int subclass, TOML true must not pass as 1
    return isinstance(value, int) and not isinstance(value, bool)


class MachineConfig:
    tape_size: int
    cell_width: int
    eof: str
    wrap_tape: bool
    max_steps: int | None

    def __init__(self):
        self.tape_size = hw.TAPE_SIZE
        self.cell_width = hw.CELL_WIDTH
        self.eof = hw.EOF_UNCHANGED
        self.wrap_tape = True
        self.max_steps = None

    def update(
        self,
        tape_size: int | None = None,
        cell_width: int | None = None,
        eof: str | None = None,
        wrap_tape: bool | None = None,
        max_steps: int | None = None
    ):
        if tape_size is not None:
            self.tape_size = tape_size

        if cell_width is not None:
            self.cell_width = cell_width

        if eof is not None:
            self.eof = eof

        if wrap_tape is not None:
            self.wrap_tape = wrap_tape

        if max_steps is not None:
            self.max_steps = max_steps

        return self

    @property
    def cell_modulus(self) -> int:
        return 1 << self.cell_width

    def validate(self):
        if not is_integer(self.tape_size) or self.tape_size < 1:
            raise UserWarning(f'Tape size must be a positive integer, got {self.tape_size!r}')

        if not is_integer(self.cell_width) \
                or not 1 <= self.cell_width <= hw.MAX_CELL_WIDTH:
            raise UserWarning(
                f'Cell width must be between 1 and {hw.MAX_CELL_WIDTH} bits, got {self.cell_width!r}'
            )

        if not isinstance(self.eof, str) or self.eof not in hw.EOF_POLICIES:
            raise UserWarning(
                f'Unknown EOF policy {self.eof!r}, expected one of {", ".join(hw.EOF_POLICIES)}'
            )

        if not isinstance(self.wrap_tape, bool):
            raise UserWarning(f'Tape wrapping must be true or false, got {self.wrap_tape!r}')

        if self.max_steps is not None \
                and (not is_integer(self.max_steps) or self.max_steps < 1):
            raise UserWarning(f'Step limit must be a positive integer, got {self.max_steps!r}')

        return self

    def __repr__(self) -> str:
        return (
            f'MachineConfig(tape_size={self.tape_size}, cell_width={self.cell_width}, '
            f'eof={self.eof!r}, wrap_tape={self.wrap_tape}, max_steps={self.max_steps})'
        )


def load_config(config_path: str | Path) -> MachineConfig:
    if isinstance(config_path, str):
        config_path = Path(config_path)

    lg.debug(f'Loading machine config {config_path}')

    try:
        config = tomllib.loads(config_path.read_text())
    except OSError:
        raise UserWarning(f'Config "{config_path}" could not be opened.')
    except tomllib.TOMLDecodeError as e:
        raise UserWarning(f'Malformed config {config_path}: {e}')

    machine = config.get('machine', {})
    unknown = set(machine) - {'tape_size', 'cell_width', 'eof', 'wrap_tape', 'max_steps'}

    if unknown:
        raise UserWarning(f'Unknown machine settings {", ".join(sorted(unknown))}')

    return MachineConfig().update(**machine).validate()
