from pathlib import Path

import pytest

from draftduel import cli
from draftduel.auth import parse_session_token


def test_token_command_prints_valid_session(monkeypatch, capsys):
    monkeypatch.setenv("DRAFTDUEL_SESSION_SECRET", "cli-secret")

    cli.main(["token", "alice"])

    token = capsys.readouterr().out.strip()
    assert parse_session_token(token, secret="cli-secret", ttl_days=1) == "alice"


def test_catalog_command_summarises_teams(tmp_path: Path, capsys):
    csv_path = tmp_path / "players.csv"
    csv_path.write_text(
        "name,team,position\n"
        "Patrick Mahomes,KC,QB\n"
        "Isiah Pacheco,KC,RB\n"
        "Josh Allen,BUF,QB\n",
        encoding="utf-8",
    )

    cli.main(["catalog", str(csv_path)])

    out = capsys.readouterr().out
    assert "3 players across 2 teams" in out
    assert "KC: QB=1, RB=1" in out
    assert "BUF: QB=1" in out


def test_command_required():
    with pytest.raises(SystemExit):
        cli.main([])
