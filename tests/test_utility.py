import pytest

from hypr_scale import utility


def test_load_config_non_mapping(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert utility.load_config(path) == {}


def test_load_config_mapping(tmp_path) -> None:
    path = tmp_path / "ok.yaml"
    path.write_text("min_logical_width: 800\n", encoding="utf-8")
    assert utility.load_config(path) == {"min_logical_width": 800}


def test_debug_logging_is_opt_in(monkeypatch, capsys) -> None:
    monkeypatch.delenv("DEBUG", raising=False)
    utility.log_debug("hidden")
    assert capsys.readouterr().err == ""

    monkeypatch.setenv("DEBUG", "1")
    utility.log_debug("shown")
    assert "[DEBUG]" in capsys.readouterr().err


def test_notify_without_daemon_is_silent(monkeypatch) -> None:
    def _missing(*args, **kwargs):
        raise FileNotFoundError("notify-send")

    monkeypatch.setattr(utility.subprocess, "run", _missing)
    utility.notify("title", "body")


def test_notify_uses_replace_tag(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(utility.subprocess, "run", lambda cmd, **kw: calls.append(cmd))
    utility.notify("Display Scale: 1.5", "Monitor: DP-1", tag="scale", timeout=1500)
    assert calls == [[
        "notify-send", "-h", "string:x-canonical-private-synchronous:scale",
        "-u", "low", "-t", "1500", "Display Scale: 1.5", "Monitor: DP-1",
    ]]


def test_preflight_requires_hyprctl(monkeypatch, capsys) -> None:
    monkeypatch.setattr(utility.shutil, "which", lambda cmd: None)
    monkeypatch.setattr(utility, "notify", lambda *a, **kw: None)
    with pytest.raises(SystemExit) as exc:
        utility.preflight_check()
    assert exc.value.code == 1
    assert "hyprctl" in capsys.readouterr().err


def test_preflight_warns_without_notify_send(monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        utility.shutil, "which", lambda cmd: None if cmd == "notify-send" else f"/usr/bin/{cmd}"
    )
    utility.preflight_check()
    assert "[WARN]" in capsys.readouterr().err


def test_load_config_warns_on_non_mapping(tmp_path, capsys) -> None:
    path = tmp_path / "scalar.yaml"
    path.write_text("just a string\n", encoding="utf-8")
    assert utility.load_config(path) == {}
    assert "top level must be a mapping" in capsys.readouterr().err


def test_load_config_empty_and_undecodable(tmp_path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert utility.load_config(empty) == {}

    garbled = tmp_path / "garbled.yaml"
    garbled.write_bytes(b"notify_tag: caf\xe9\n")
    assert utility.load_config(garbled) == {}


def test_die_passes_tag(monkeypatch) -> None:
    sent = []
    monkeypatch.setattr(utility, "notify", lambda *a, **kw: sent.append((a, kw)))
    with pytest.raises(SystemExit):
        utility.die("boom", tag="custom")
    assert sent == [(("Monitor Scale Failed", "boom", "critical"), {"tag": "custom"})]
