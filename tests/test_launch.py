import os
import pwd

import pytest

from procvisor.launch import (
    build_environment,
    exit_codes,
    in_exit_codes,
    popen_options,
    resolve_user,
)
from procvisor.state import ProgramConfig


def _config(**settings):
    return ProgramConfig(name="program:test1", group="test", config_dir=".", settings=settings)


def test_default_exit_codes():
    assert exit_codes(_config()) == [0, 2]


def test_exit_codes_skip_malformed_entries():
    assert exit_codes(_config(exitcodes="0,1,x")) == [0, 1]


def test_in_exit_codes():
    config = _config()
    assert in_exit_codes(config, 0)
    assert in_exit_codes(config, 2)
    assert not in_exit_codes(config, 1)


def test_resolve_user_empty_spec():
    assert resolve_user("") is None


def test_resolve_current_user():
    entry = pwd.getpwuid(os.getuid())
    assert resolve_user(entry.pw_name) == (entry.pw_uid, entry.pw_gid)


def test_resolve_unknown_user_raises():
    with pytest.raises(LookupError):
        resolve_user("no_such_user_for_procvisor")


def test_resolve_unknown_group_raises():
    entry = pwd.getpwuid(os.getuid())
    with pytest.raises(LookupError):
        resolve_user(entry.pw_name + ":no_such_group_for_procvisor")


def test_build_environment_inherits_and_overrides(monkeypatch):
    monkeypatch.setenv("PROCVISOR_INHERITED", "kept")
    env = build_environment(_config(environment='A="1",B=two'))
    assert env["A"] == "1"
    assert env["B"] == "two"
    assert env["PROCVISOR_INHERITED"] == "kept"


def test_build_environment_reads_env_files(tmp_path):
    env_file = tmp_path / "vars.env"
    env_file.write_text("# comment\nFROM_FILE=yes\nexport SHARED='file'\n", encoding="utf-8")
    config = ProgramConfig(
        name="program:test1",
        config_dir=str(tmp_path),
        settings={"envFiles": "vars.env", "environment": "SHARED=inline"},
    )
    env = build_environment(config)
    assert env["FROM_FILE"] == "yes"
    assert env["SHARED"] == "inline"


def test_popen_options_directory_and_session(tmp_path):
    options = popen_options(_config(directory=str(tmp_path)))
    assert options["cwd"] == str(tmp_path)
    assert options["start_new_session"] is True
    assert "user" not in options


def test_popen_options_same_user_is_not_switched():
    entry = pwd.getpwuid(os.getuid())
    spec = entry.pw_name
    if entry.pw_gid != os.getgid():
        spec = None
    options = popen_options(_config(user=spec or ""))
    assert "user" not in options and "group" not in options
    assert options["env"]["PATH"] == os.environ["PATH"]


def test_popen_options_unknown_user_raises():
    with pytest.raises(LookupError):
        popen_options(_config(user="no_such_user_for_procvisor"))