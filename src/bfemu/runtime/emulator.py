import sys
from pathlib import Path
import logging as lg

import click

import bfemu.common.hwconf as hw
from bfemu.common.config import MachineConfig, load_config
from bfemu.runtime.peripheral import ConsoleInput, ConsoleOutput
import bfemu.runtime.program as program
import bfemu.runtime.cpu as cpu


def execute(
    prog: program.Program,
    config: MachineConfig | None = None,
    input_fn: cpu.InputFn | None = None,
    output_fn: cpu.OutputFn | None = None
) -> cpu.RunResult:
    proc = cpu.CPU(prog, config, input_fn, output_fn)
    lg.info(f'Executing {len(prog)} symbols on {proc.config}')
    result = proc.run()
    lg.info(f'Execution halted after {result.steps} steps')
    return result


def make_config(config_path: Path | None, **params) -> MachineConfig:
    config = load_config(config_path) if config_path else MachineConfig()
    return config.update(**params).validate()


def dump_tape(result: cpu.RunResult, length: int):
    cells = ' '.join(str(v) for v in result.tape[:length])
    click.echo(f'TP:{result.tape_pointer} [{cells}]', err=True)


@click.command()
@click.pass_context
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-c', '--config', 'config_path', type=Path, help='TOML machine config')
@click.option('--tape-size', type=int, help=f'Number of tape cells (default {hw.TAPE_SIZE})')
@click.option('--cell-width', type=int, help=f'Cell width in bits (default {hw.CELL_WIDTH})')
@click.option('--eof', type=click.Choice(hw.EOF_POLICIES), help='What input stores at end of input')
@click.option('--strict-tape', is_flag=True, help='Fail instead of wrapping the tape pointer')
@click.option('--max-steps', type=int, help='Abort after this many instructions')
@click.option('--dump', type=click.IntRange(min=0), default=0, help='Print this many tape cells to stderr after halt')
@click.argument('source', type=Path, required=False)
def run(
    ctx: click.Context,
    verbose: bool,
    config_path: Path | None,
    strict_tape: bool,
    dump: int,
    source: Path | None,
    **params
):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.WARNING)
    lg.info('BFEMU')

    if source is None:
        click.echo(ctx.get_usage())
        sys.exit(hw.EXIT_ERROR)

    try:
        wrap_tape = False if strict_tape else None
        config = make_config(config_path, wrap_tape=wrap_tape, **params)
        prog = program.load_file(source)
        result = execute(prog, config, ConsoleInput(), ConsoleOutput())

    except UserWarning as e:
        lg.error(f'Configuration error: {e}')
        sys.exit(hw.EXIT_ERROR)

    except program.LoadError as e:
        lg.error(str(e))
        sys.exit(hw.EXIT_ERROR)

    except cpu.RunError as e:
        lg.error(f'Execution halted on error: {e}')
        sys.exit(hw.EXIT_ERROR)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(hw.EXIT_KEYBOARD)

    if dump:
        dump_tape(result, dump)

    sys.exit(hw.EXIT_HALT)


if __name__ == '__main__':
    run()
