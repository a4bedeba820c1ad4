"""Tests for CLI command helpers."""

import pytest

from audition_platform.services import (
    get_delay_config,
    list_affiliations,
    record_group_decision,
)
from cli.commands import build_parser, main


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_rejects_unknown_group():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["affiliations", "add", "rep@example.edu", "Whiffenpoofs"])


def test_affiliations_add_and_list(db_path, capsys):
    main(["--db", str(db_path), "affiliations", "add", "rep@example.edu", "Lowkeys", "--admin"])
    main(["--db", str(db_path), "affiliations", "list"])
    out = capsys.readouterr().out

    assert "rep@example.edu now decides for Lowkeys (admin)" in out
    assert list_affiliations(db_path)[0].is_admin is True


def test_delay_set_and_show(db_path, capsys):
    main(["--db", str(db_path), "delay", "show"])
    main(["--db", str(db_path), "delay", "set", "--baseline", "1000", "--range", "250"])
    main(["--db", str(db_path), "delay", "show"])
    out = capsys.readouterr().out

    assert "Delay not configured." in out
    assert "Baseline: 1000ms" in out
    assert get_delay_config(db_path).range == 250


def test_delay_set_negative_exits(db_path):
    with pytest.raises(SystemExit):
        main(["--db", str(db_path), "delay", "set", "--baseline", "-5", "--range", "0"])


def test_compers_and_feed(configured_db, scheduler, make_comper, capsys):
    comper = make_comper(ranked=["Lowkeys", "Veritones"], name="Ada")
    record_group_decision(configured_db, comper.id, "Lowkeys", True, scheduler=scheduler)

    main(["--db", str(configured_db), "compers", "list"])
    out = capsys.readouterr().out
    assert "Lowkeys=accepted, Veritones=undecided" in out
    assert "resolution: matched (Lowkeys), announcement: scheduled" in out

    scheduler.fire_all()
    main(["--db", str(configured_db), "feed"])
    assert "Ada matched with Lowkeys!" in capsys.readouterr().out

    main(["--db", str(configured_db), "feed", "--group", "Callbacks"])
    assert "No updates yet." in capsys.readouterr().out


def test_reset_with_confirmation_flag(configured_db, make_comper, capsys):
    make_comper()
    main(["--db", str(configured_db), "reset", "--yes"])
    assert "Reset 1 comper(s), deleted 0 update(s)." in capsys.readouterr().out


def test_reset_cancelled(configured_db, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda _: "n")
    main(["--db", str(configured_db), "reset"])
    assert "Cancelled." in capsys.readouterr().out
