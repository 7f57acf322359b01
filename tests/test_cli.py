import pytest

from agora import cli


def test_check_line_allowed():
    assert cli.check_line("hello world") == "✅ allowed"


def test_check_line_blocked_names_label():
    report = cli.check_line("sh1t", label="title")
    assert report.startswith("⛔ Title contains inappropriate language.")
    assert "shit" in report


def test_main_exit_code(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["agora-moderate", "hello world", "k y s"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert "'hello world': ✅ allowed" in out


def test_main_clean_input(monkeypatch):
    monkeypatch.setattr("sys.argv", ["agora-moderate", "Good morning"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 0


def test_interactive_session_stops_on_quit(monkeypatch, capsys):
    replies = iter(["s.h.i.t", "", "quit"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(replies))
    cli.interactive_session()
    out = capsys.readouterr().out
    assert "⛔ Content contains inappropriate language." in out


def test_exit_code_comes_from_filter_verdict(monkeypatch):
    monkeypatch.setattr(cli, "format_report", lambda result, label="content": "report")
    monkeypatch.setattr("sys.argv", ["agora-moderate", "sh1t"])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    assert exc_info.value.code == 1
