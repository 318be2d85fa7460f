import io

import pytest

from light_evm import __version__
from light_evm.cli import EXIT_CONFIG_ERROR, EXIT_EXECUTION_ERROR, EXIT_OK, build_config, main

SIMPLE_HEX = "0x600560060160020200"


def test_successful_run_quiet(capsys):
    assert main(["-b", SIMPLE_HEX, "--no-verbose", "--no-step"], environ={}) == EXIT_OK
    out = capsys.readouterr().out
    assert out == "Execution completed successfully\n"


def test_successful_run_with_trace(capsys):
    assert main(["--bytecode", SIMPLE_HEX, "--no-step"], environ={}) == EXIT_OK
    out = capsys.readouterr().out
    assert "Bytecode:" in out
    assert "MUL: 2 * 11 => 22" in out
    assert out.rstrip().endswith("Execution completed successfully")


def test_step_mode_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("p\n" * 6))
    assert main(["-b", SIMPLE_HEX], environ={}) == EXIT_OK
    out = capsys.readouterr().out
    assert out.startswith("Press 'p' to proceed to the next step.")


def test_execution_error(capsys):
    assert main(["-b", "0x0100", "--no-step", "--no-verbose"], environ={}) == EXIT_EXECUTION_ERROR
    captured = capsys.readouterr()
    assert "Error: Stack underflow" in captured.err
    assert "Execution completed successfully" not in captured.out


def test_invalid_opcode_error(capsys):
    assert main(["-b", "ff", "--no-step", "--no-verbose"], environ={}) == EXIT_EXECUTION_ERROR
    assert "Error: Invalid opcode 0xff at pc 0" in capsys.readouterr().err


def test_bad_hex_aborts_before_execution(capsys):
    assert main(["-b", "0x6zz", "--no-step"], environ={}) == EXIT_CONFIG_ERROR
    captured = capsys.readouterr()
    assert "Error: Invalid bytecode" in captured.err
    assert "Bytecode:" not in captured.out


def test_disassemble(capsys):
    assert main(["-b", "600560", "--disassemble"], environ={}) == EXIT_OK
    assert capsys.readouterr().out == "0000: PUSH1 0x05\n0002: PUSH1 <missing>\n"


def test_max_steps_option(capsys):
    assert main(["-b", SIMPLE_HEX, "--no-step", "--no-verbose", "--max-steps", "2"], environ={}) == EXIT_EXECUTION_ERROR
    assert "Step limit of 2 exceeded" in capsys.readouterr().err


def test_environment_defaults():
    config, disassemble = build_config(
        ["-b", SIMPLE_HEX],
        environ={
            "LIGHT_EVM_MAX_STEPS": "10",
            "LIGHT_EVM_MAX_STACK_DEPTH": "4",
            "LIGHT_EVM_LOG_LEVEL": "debug",
        },
    )
    assert config.max_steps == 10
    assert config.max_stack_depth == 4
    assert config.log_level == "DEBUG"
    assert config.trace is True
    assert config.step_by_step is True
    assert disassemble is False


def test_arguments_override_environment():
    config, _ = build_config(
        ["-b", SIMPLE_HEX, "--max-steps", "3", "--log-level", "error"],
        environ={"LIGHT_EVM_MAX_STEPS": "10"},
    )
    assert config.max_steps == 3
    assert config.log_level == "ERROR"


def test_bad_environment_value(capsys):
    with pytest.raises(SystemExit) as excinfo:
        build_config(["-b", SIMPLE_HEX], environ={"LIGHT_EVM_MAX_STEPS": "many"})
    assert excinfo.value.code == EXIT_CONFIG_ERROR
    assert "LIGHT_EVM_MAX_STEPS" in capsys.readouterr().err


def test_negative_limit_rejected():
    with pytest.raises(SystemExit) as excinfo:
        build_config(["-b", SIMPLE_HEX, "--max-steps", "-1"], environ={})
    assert excinfo.value.code == 2


def test_bytecode_is_required():
    with pytest.raises(SystemExit) as excinfo:
        build_config([], environ={})
    assert excinfo.value.code == 2


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"], environ={})
    assert __version__ in capsys.readouterr().out
