import logging as lg
from dataclasses import dataclass
from typing import Callable

import bfemu.common.ops as ops
import bfemu.common.hwconf as hw
from bfemu.common.config import MachineConfig
from bfemu.runtime.program import Program


InputFn = Callable[[], int | None]     # None at end of input
OutputFn = Callable[[int], None]


class Halt(Exception):
    pass


class RunError(Exception):
    pass


class TapeOutOfBounds(RunError):
    def __init__(self, tp: int, ip: int):
        super().__init__(f'Tape pointer moved out of range to {tp} at instruction {ip}')
        self.tp = tp
        self.ip = ip


class StepLimitExceeded(RunError):
    def __init__(self, steps: int, ip: int):
        super().__init__(f'Step limit of {steps} reached at instruction {ip}')
        self.steps = steps
        self.ip = ip


@dataclass
class RunResult:
    steps: int
    tape: list[int]
    tape_pointer: int
    ip: int
    open_loops: int


def no_input() -> int | None:
    return None


def discard_output(value: int):
    pass


class CPU():
    ip: int  # Instruction pointer
    tp: int  # Tape pointer
    jumps: list[int]  # Jump stack: positions of loops being executed
    tape: list[int]
    steps: int

    def __init__(
        self,
        program: Program,
        config: MachineConfig | None = None,
        input_fn: InputFn | None = None,
        output_fn: OutputFn | None = None
    ):
        self.program = program      # Shared, read-only
        self.config = (config or MachineConfig()).validate()
        self.input_fn = input_fn or no_input
        self.output_fn = output_fn or discard_output

        self.tape_size = self.config.tape_size
        self.cell_mask = self.config.cell_modulus - 1

        self.ip = 0
        self.tp = 0
        self.jumps = []
        self.tape = [0] * self.tape_size
        self.steps = 0

    # - Helpers - #

    def debug_dump(self):
        state = [f'{k}:{v}' for k, v in {
            'IP': self.ip,
            'OP': self.program.instruction_at(self.ip) or 'END',
            'TP': self.tp,
            'CELL': self.tape[self.tp],
            'DEPTH': len(self.jumps),
            'STEP': self.steps
        }.items()]

        lg.debug(' '.join(state))

    def tape_prefix(self, length: int) -> list[int]:
        return self.tape[:length]

    def move(self, delta: int):
        tp = self.tp + delta

        if not 0 <= tp < self.tape_size:
            if not self.config.wrap_tape:
                raise TapeOutOfBounds(tp, self.ip)

            tp %= self.tape_size

        self.tp = tp
        self.ip += 1

    def add(self, delta: int):
        self.tape[self.tp] = (self.tape[self.tp] + delta) & self.cell_mask
        self.ip += 1

    # - Operations - #

    def hlt(self):
        raise Halt()

    def nop(self):
        self.ip += 1

    def rgt(self):
        self.move(1)

    def lft(self):
        self.move(-1)

    def inc(self):
        self.add(1)

    def dec(self):
        self.add(-1)

    def out(self):
        self.output_fn(self.tape[self.tp])
        self.ip += 1

    def inp(self):
        value = self.input_fn()

        if value is None:
            lg.debug(f'End of input at {self.ip}, policy {self.config.eof}')

            if self.config.eof == hw.EOF_ZERO:
                self.tape[self.tp] = 0

            elif self.config.eof == hw.EOF_MAX:
                self.tape[self.tp] = self.cell_mask

        else:
            self.tape[self.tp] = value & self.cell_mask

        self.ip += 1

    def ent(self):
        if self.tape[self.tp]:
            self.jumps.append(self.ip)
            self.ip += 1
        else:
            self.ip = self.program.match_of(self.ip) + 1

    def ext(self):
        if not self.jumps:
            raise RuntimeError(f'Jump stack underflow at {self.ip}')

        if self.tape[self.tp]:
            self.ip = self.jumps[-1] + 1
        else:
            self.jumps.pop()
            self.ip += 1

    HANDLERS = {
        ops.END: hlt,
        ops.RIGHT: rgt,
        ops.LEFT: lft,
        ops.INC: inc,
        ops.DEC: dec,
        ops.OUT: out,
        ops.INP: inp,
        ops.ENTER: ent,
        ops.EXIT: ext
    }

    # -- Implementation -- #

    def exec_next(self):
        op = self.program.instruction_at(self.ip)
        handler = self.HANDLERS.get(op, CPU.nop)
        handler(self)

        if op in ops.ALPHABET:
            self.steps += 1

    def result(self) -> RunResult:
        return RunResult(
            steps=self.steps,
            tape=list(self.tape),
            tape_pointer=self.tp,
            ip=self.ip,
            open_loops=len(self.jumps)
        )

    def run(self, max_steps: int | None = None) -> RunResult:
        if max_steps is None:
            max_steps = self.config.max_steps

        debug = lg.getLogger().isEnabledFor(lg.DEBUG)

        try:
            while True:
                if max_steps is not None and self.steps >= max_steps:
                    raise StepLimitExceeded(self.steps, self.ip)

                if debug:
                    self.debug_dump()

                self.exec_next()

        except Halt:
            pass

        if self.jumps:
            lg.warning(f'Program ended with {len(self.jumps)} open loops')

        return self.result()


def run(
    program: Program,
    config: MachineConfig | None = None,
    input_fn: InputFn | None = None,
    output_fn: OutputFn | None = None,
    max_steps: int | None = None
) -> RunResult:
    proc = CPU(program, config, input_fn, output_fn)
    return proc.run(max_steps)
