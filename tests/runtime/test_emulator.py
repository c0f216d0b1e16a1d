from click.testing import CliRunner

import bfemu.runtime.emulator as emulator
from bfemu.runtime.emulator import run, make_config, dump_tape

import unit_utils


def invoke(*args, input: bytes | None = None):
    runner = CliRunner()
    return runner.invoke(run, [str(a) for a in args], input=input)


def test_hello():
    result = invoke(unit_utils.find_file('testdata/programs/hello.b'))
    assert result.exit_code == 0
    assert result.stdout_bytes == b'Hello World!\n'


def test_cat_with_eof_zero():
    result = invoke('--eof', 'zero', unit_utils.find_file('testdata/programs/cat.b'), input=b'abc')
    assert result.exit_code == 0
    assert result.stdout_bytes == b'abc'


def test_missing_argument():
    result = invoke()
    assert result.exit_code == 1
    assert 'Usage:' in result.stdout


def test_unreadable_file(tmp_path):
    result = invoke(tmp_path / 'missing.b')
    assert result.exit_code == 1
    assert result.stdout_bytes == b''


def test_unbalanced_source():
    result = invoke(unit_utils.find_file('testdata/programs/unclosed.b'))
    assert result.exit_code == 1
    # Nothing runs before the structural check
    assert result.stdout_bytes == b''


def test_strict_tape(tmp_path):
    source = tmp_path / 'left.b'
    source.write_text('+.<')
    result = invoke('--strict-tape', source)
    assert result.exit_code == 1
    assert result.stdout_bytes == b'\x01'


def test_wrapping_tape(tmp_path):
    source = tmp_path / 'left.b'
    source.write_text('<+.')
    result = invoke('--tape-size', '4', source)
    assert result.exit_code == 0
    assert result.stdout_bytes == b'\x01'


def test_step_limit(tmp_path):
    source = tmp_path / 'spin.b'
    source.write_text('+[]')
    result = invoke('--max-steps', '100', source)
    assert result.exit_code == 1


def test_config_file(tmp_path):
    source = tmp_path / 'under.b'
    source.write_text('-')
    result = invoke('-c', unit_utils.find_file('testdata/machine.toml'), '--dump', '2', source)
    assert result.exit_code == 0


def test_bad_config():
    result = invoke(
        '--config', unit_utils.find_file('testdata/broken.toml'),
        unit_utils.find_file('testdata/programs/hello.b')
    )
    assert result.exit_code == 1
    assert result.stdout_bytes == b''


def test_invalid_cell_width(tmp_path):
    source = tmp_path / 'noop.b'
    source.write_text('+')
    result = invoke('--cell-width', '0', source)
    assert result.exit_code == 1


def test_make_config_overrides_file():
    config = make_config(unit_utils.find_file('testdata/machine.toml'), tape_size=8, eof=None)
    assert config.tape_size == 8
    assert config.cell_width == 16
    assert config.eof == 'zero'


def test_dump_tape(capsys):
    result, _ = unit_utils.execute_source('+>++<')
    dump_tape(result, 3)
    assert capsys.readouterr().err == 'TP:0 [1 2 0]\n'


def test_keyboard_interrupt(monkeypatch):
    def interrupted(*args, **kwargs):
        raise KeyboardInterrupt()

    monkeypatch.setattr(emulator, 'execute', interrupted)
    result = invoke(unit_utils.find_file('testdata/programs/hello.b'))
    assert result.exit_code == 3


def test_wrongly_typed_config(tmp_path):
    config = tmp_path / 'typed.toml'
    config.write_text('[machine]\nmax_steps = "10"\n')
    result = invoke('-c', config, unit_utils.find_file('testdata/programs/hello.b'))
    assert result.exit_code == 1
    assert not isinstance(result.exception, TypeError)
    assert result.stdout_bytes == b''


def test_negative_dump(tmp_path):
    source = tmp_path / 'noop.b'
    source.write_text('+')
    result = invoke('--dump', '-1', source)
    assert result.exit_code == 2
