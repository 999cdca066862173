import json

import pytest

from afritrade import main as cli


@pytest.fixture(autouse=True)
def quick_settings(test_settings, monkeypatch):
    monkeypatch.setattr(cli, "settings", test_settings)


def test_summary_warns_on_demonstration_data(capsys):
    assert cli.main(["--source", "synthetic", "--seed", "1", "--year", "2022", "--limit", "3"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Intra-African trade, 2022")
    assert "WARNING: live trade data unavailable" in out
    assert "Intra-African share : 100.0%" in out
    assert "Top routes:" in out
    assert out.count(" → ") == 3


def test_json_output(capsys):
    assert cli.main(["--source", "synthetic", "--seed", "1", "--year", "2021", "--json"]) == 0

    snapshot = json.loads(capsys.readouterr().out)
    assert snapshot["year"] == 2021
    assert snapshot["using_fallback"] is True
    assert len(snapshot["trade_flows"]) == 12 * 11 * 2
    assert len(snapshot["stats"]["top_routes"]) == 10


def test_same_seed_gives_same_output(capsys):
    cli.main(["--source", "synthetic", "--seed", "4", "--year", "2020"])
    first = capsys.readouterr().out
    cli.main(["--source", "synthetic", "--seed", "4", "--year", "2020"])
    assert capsys.readouterr().out == first


def test_invalid_year_exits_with_usage_code(capsys):
    assert cli.main(["--source", "synthetic", "--year", "2009"]) == 2
    assert capsys.readouterr().out == ""


def test_zero_limit_prints_no_routes(capsys):
    assert cli.main(["--source", "synthetic", "--seed", "1", "--year", "2022", "--limit", "0"]) == 0

    out = capsys.readouterr().out
    assert "Active routes       : 0" in out
    assert "Top routes:" not in out
