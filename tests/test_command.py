import subprocess
import sys

import pytest

from procvisor.command import create_command, execute_command, parse_command


def test_empty_command_line():
    with pytest.raises(ValueError):
        parse_command(" ")


def test_normal_command_line():
    assert parse_command("program arg1 arg2") == ["program", "arg1", "arg2"]


def test_command_line_with_quotation_marks():
    args = parse_command("program 'this is arg1' args=\"this is arg2\"")
    assert args == ["program", "this is arg1", 'args="this is arg2"']


def test_command_line_args_is_quotation_marks():
    args = parse_command(
        '/home/test/nginx-1.13.0/objs/nginx -p /home/test/nginx-1.13.0 '
        '-c conf/nginx.conf -g "daemon off;"'
    )
    assert args == [
        "/home/test/nginx-1.13.0/objs/nginx",
        "-p",
        "/home/test/nginx-1.13.0",
        "-c",
        "conf/nginx.conf",
        "-g",
        "daemon off;",
    ]


def test_extra_whitespace_is_ignored():
    assert parse_command("  program   arg1\targ2  ") == ["program", "arg1", "arg2"]


def test_create_command_from_string():
    assert create_command("program arg1") == ["program", "arg1"]


def test_create_command_from_list_is_kept():
    assert create_command(["program", "a b"]) == ["program", "a b"]


def test_create_command_empty_list_raises():
    with pytest.raises(ValueError):
        create_command([])


def test_create_command_blank_string_raises():
    with pytest.raises(ValueError):
        create_command("")


def test_execute_command_combines_output():
    out = execute_command(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"]
    )
    lines = out.decode().split()
    assert sorted(lines) == ["err", "out"]


def test_execute_command_failure_raises():
    with pytest.raises(subprocess.CalledProcessError):
        execute_command([sys.executable, "-c", "raise SystemExit(3)"])