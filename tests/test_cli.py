import pytest

from homefix import cli
from homefix.errors import ConfigurationError


def test_missing_configuration_exits_with_error(monkeypatch, caplog):
    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.delenv("SERVICE_ROLE_KEY", raising=False)

    assert cli.main(["tables"]) == 1
    assert "BACKEND_URL" in caplog.text
    assert "SERVICE_ROLE_KEY" in caplog.text


def test_load_settings_names_missing_keys(monkeypatch):
    monkeypatch.delenv("SERVICE_ROLE_KEY", raising=False)

    with pytest.raises(ConfigurationError) as excinfo:
        cli.load_settings()

    assert "SERVICE_ROLE_KEY" in str(excinfo.value)
    assert "BACKEND_URL" not in str(excinfo.value)


def test_unreachable_backend_exits_with_error(capsys):
    assert cli.main(["test-connection"]) == 1
    assert "BACKEND_URL: set" in capsys.readouterr().out


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])


def test_prompt_admin_details_retries(monkeypatch, capsys):
    answers = iter(["not-an-email", "ops@homefix.sa", "Sara Alharbi"])
    passwords = iter(["short", "  long-enough-secret  "])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": next(passwords))

    email, password, full_name = cli.prompt_admin_details(None, None)

    assert (email, password, full_name) == ("ops@homefix.sa", "long-enough-secret", "Sara Alharbi")
    out = capsys.readouterr().out
    assert "valid email" in out
    assert "at least 8 characters" in out


def test_prompt_admin_details_uses_flags(monkeypatch):
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": "correct-horse")

    assert cli.prompt_admin_details("root@homefix.sa", "Root") == ("root@homefix.sa", "correct-horse", "Root")
