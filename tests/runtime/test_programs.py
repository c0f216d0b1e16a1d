import pytest

from bfemu.common.config import MachineConfig
import bfemu.runtime.cpu as cpu

import unit_utils


def test_hello():
    result, output = unit_utils.execute_program_file('hello')
    assert output.text() == unit_utils.load_file('testdata/programs/hello.log')
    assert result.open_loops == 0


def test_cat_until_eof():
    config = MachineConfig().update(eof='zero')
    _, output = unit_utils.execute_program_file('cat', b'echo me', config)
    assert output.data == b'echo me'


def test_cat_loops_when_eof_leaves_cell():
    config = MachineConfig().update(max_steps=1000)

    with pytest.raises(cpu.StepLimitExceeded):
        unit_utils.execute_program_file('cat', b'x', config)


def test_execute_source():
    result, output = unit_utils.execute_source('++++++++[>++++++<-]>+.', b'')
    assert output.data == b'1'
    assert result.tape[:2] == [0, 49]
