import json
import subprocess

import pytest

from hypr_scale import hyprctl
from hypr_scale.hyprctl import HyprctlError, MonitorState

MONITORS = [
    {
        "name": "eDP-1", "width": 2880, "height": 1800, "scale": 2.0,
        "refreshRate": 120.0, "x": 0, "y": 0, "focused": False,
    },
    {
        "name": "DP-1", "width": 3840, "height": 2160, "scale": 1.5,
        "refreshRate": 59.99700, "x": 1440, "y": 0, "focused": True,
    },
]


@pytest.fixture
def fake_run(monkeypatch):
    calls: list[list[str]] = []
    replies: dict[str, object] = {"stdout": json.dumps(MONITORS), "returncode": 0}

    def _run(cmd, **kwargs):
        calls.append(cmd)
        error = replies.get("raise")
        if error is not None:
            raise error
        if kwargs.get("check") and replies["returncode"]:
            raise subprocess.CalledProcessError(replies["returncode"], cmd)
        return subprocess.CompletedProcess(cmd, replies["returncode"], stdout=replies["stdout"])

    monkeypatch.setattr(hyprctl.subprocess, "run", _run)
    return calls, replies


def test_focused_monitor_is_default(fake_run) -> None:
    state = hyprctl.get_monitor()
    assert state == MonitorState("DP-1", 3840, 2160, 1.5, 59.997, 1440, 0)
    assert fake_run[0] == [["hyprctl", "-j", "monitors"]]


def test_first_monitor_without_focus(fake_run) -> None:
    unfocused = [dict(m, focused=False) for m in MONITORS]
    fake_run[1]["stdout"] = json.dumps(unfocused)
    assert hyprctl.get_monitor().name == "eDP-1"


def test_target_override(fake_run) -> None:
    state = hyprctl.get_monitor("eDP-1")
    assert (state.physical_width, state.physical_height, state.current_scale) == (2880, 1800, 2.0)


def test_missing_target_is_fatal(fake_run) -> None:
    with pytest.raises(HyprctlError, match="HDMI-A-1"):
        hyprctl.get_monitor("HDMI-A-1")


def test_no_monitors_is_fatal(fake_run) -> None:
    fake_run[1]["stdout"] = "[]"
    with pytest.raises(HyprctlError, match="No active monitors"):
        hyprctl.get_monitor()


@pytest.mark.parametrize(
    "reply",
    [
        {"stdout": "not json"},
        {"stdout": "{}"},
        {"returncode": 1},
        {"raise": FileNotFoundError("hyprctl")},
    ],
)
def test_ipc_failures_raise(fake_run, reply) -> None:
    fake_run[1].update(reply)
    with pytest.raises(HyprctlError):
        hyprctl.query_monitors()


def test_malformed_entry_raises(fake_run) -> None:
    fake_run[1]["stdout"] = json.dumps([{"name": "DP-1", "focused": True}])
    with pytest.raises(HyprctlError, match="Malformed"):
        hyprctl.get_monitor()


@pytest.mark.parametrize(
    "rate,expected",
    [(60.0, "60"), (143.856, "143.86"), (59.951, "59.95"), (143.998, "144"), (74.9, "74.90")],
)
def test_format_refresh(rate: float, expected: str) -> None:
    assert hyprctl.format_refresh(rate) == expected


def test_format_rule() -> None:
    state = MonitorState("DP-1", 3840, 2160, 1.5, 60.0, 1440, -200)
    assert hyprctl.format_rule(state, "1.25") == "DP-1,3840x2160@60,1440x-200,1.25"


def test_apply_rule(fake_run) -> None:
    hyprctl.apply_rule("DP-1,3840x2160@60,0x0,1.25")
    assert fake_run[0][-1] == ["hyprctl", "keyword", "monitor", "DP-1,3840x2160@60,0x0,1.25"]


def test_rejected_rule_raises(fake_run) -> None:
    fake_run[1]["returncode"] = 1
    with pytest.raises(HyprctlError, match="rejected"):
        hyprctl.apply_rule("DP-1,bogus,0x0,1")
