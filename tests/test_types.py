from procvisor.types import (
    ProcessInfo,
    ProcessSignal,
    ReloadConfigResult,
    sort_process_infos,
)


def test_full_name_with_group():
    info = ProcessInfo(name="web", group="frontend")
    assert info.full_name == "frontend:web"


def test_full_name_without_group():
    info = ProcessInfo(name="web")
    assert info.full_name == "web"


def test_to_dict_uses_wire_names():
    info = ProcessInfo(name="web", stdout_logfile="/dev/null", pid=42)
    data = info.to_dict()
    assert data["name"] == "web"
    assert data["stdout_logfile"] == "/dev/null"
    assert data["pid"] == 42
    assert set(data) >= {"statename", "exitstatus", "stderr_logfile", "spawnerr"}


def test_dict_round_trip():
    info = ProcessInfo(
        name="worker",
        group="jobs",
        description="pid 12, uptime 0:00:01",
        start=100,
        stop=0,
        now=101,
        state=20,
        statename="Running",
        exitstatus=0,
        logfile="/tmp/w.log",
        stdout_logfile="/tmp/w.log",
        stderr_logfile="/tmp/w.err",
        pid=12,
    )
    assert ProcessInfo.from_dict(info.to_dict()) == info


def test_from_dict_ignores_unknown_and_fills_defaults():
    info = ProcessInfo.from_dict({"name": "x", "bogus": 1})
    assert info == ProcessInfo(name="x")


def test_sort_process_infos_by_name():
    infos = [ProcessInfo(name=n) for n in ("c", "a", "b")]
    sort_process_infos(infos)
    assert [i.name for i in infos] == ["a", "b", "c"]


def test_sort_process_infos_is_ordered_permutation():
    names = ["zeta", "alpha", "mid", "alpha2", "beta"]
    infos = [ProcessInfo(name=n) for n in names]
    sort_process_infos(infos)
    result = [i.name for i in infos]
    assert sorted(names) == result
    assert all(a <= b for a, b in zip(result, result[1:]))


def test_reload_config_result_defaults_are_independent():
    first = ReloadConfigResult()
    second = ReloadConfigResult()
    first.added_group.append("g")
    assert second.added_group == []
    assert first.changed_group == [] and first.removed_group == []


def test_process_signal_fields():
    sig = ProcessSignal(name="web", signal="HUP")
    assert (sig.name, sig.signal) == ("web", "HUP")