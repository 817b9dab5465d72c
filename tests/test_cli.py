"""
cpu16run CLI Tests
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

import cpu16run
from cpu16.loader import write_program
from cpu16.programs import FIBONACCI


@pytest.fixture
def fib_file(tmp_path):
    path = tmp_path / "fib.hex"
    write_program(path, FIBONACCI)
    return path


class TestRun:

    def test_demo_without_delay(self, capsys):
        assert cpu16run.main(["--delay-ms", "0"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[:5] == ["1", "2", "3", "5", "8"]
        assert out[-1] == "46368"

    def test_other_demo(self, capsys):
        assert cpu16run.main(["--demo", "countdown", "--delay-ms", "0"]) == 0
        assert capsys.readouterr().out.split() == ["5", "4", "3", "2", "1"]

    def test_program_file(self, fib_file, capsys):
        assert cpu16run.main([str(fib_file)]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 23

    def test_dump_regs(self, fib_file, capsys):
        assert cpu16run.main([str(fib_file), "--dump-regs"]) == 0
        err = capsys.readouterr().err
        assert "r4=2511" in err
        assert "[HALT]" in err

    def test_trace(self, tmp_path, capsys):
        path = tmp_path / "one.hex"
        path.write_text("A200 0007\nF000 0000\n")
        assert cpu16run.main([str(path), "--trace"]) == 0
        err = capsys.readouterr().err
        assert "$0000: LDV 2, 0x0007" in err
        assert "$0002: HLT" in err

    def test_disasm_only(self, fib_file, capsys):
        assert cpu16run.main([str(fib_file), "--disasm"]) == 0
        out = capsys.readouterr().out
        assert "$0010: E100 0006  J 1 0, 0x0006" in out
        assert "46368" not in out


class TestExitStatus:

    def test_missing_file(self, tmp_path, capsys):
        assert cpu16run.main([str(tmp_path / "missing.hex")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_register_count(self, fib_file, capsys):
        assert cpu16run.main([str(fib_file), "--registers", "4"]) == 1
        assert "num_registers" in capsys.readouterr().err

    def test_signed_word_rejected_before_disasm(self, tmp_path, capsys):
        path = tmp_path / "signed.hex"
        path.write_text("A200 0000\n-1 0000\n")
        assert cpu16run.main([str(path), "--disasm"]) == 1
        captured = capsys.readouterr()
        assert "line 2" in captured.err
        assert "FFFF" not in captured.out

    def test_illegal_opcode(self, tmp_path, capsys):
        path = tmp_path / "bad.hex"
        path.write_text("B000 0000\n")
        assert cpu16run.main([str(path)]) == 2
        assert "ILLEGAL" in capsys.readouterr().err

    def test_fault(self, tmp_path, capsys):
        path = tmp_path / "fault.hex"
        path.write_text("A700 0001\n")
        assert cpu16run.main([str(path)]) == 2
        assert "FAULT" in capsys.readouterr().err

    def test_timeout(self, fib_file, capsys):
        assert cpu16run.main([str(fib_file), "--max-cycles", "0x10"]) == 2
        assert "TIMEOUT after 16 cycles" in capsys.readouterr().err


class TestArgs:

    @pytest.mark.parametrize("text,value", [("10", 10), ("0x10", 16), ("$FF", 255)])
    def test_parse_int_arg(self, text, value):
        assert cpu16run.parse_int_arg(text) == value

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cpu16run.main(["--version"])
        assert exc.value.code == 0
        assert "cpu16run" in capsys.readouterr().out
