import json

from typer.testing import CliRunner

from campaign_feed.main import cli

runner = CliRunner()


def test_version():
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "Campaign Feed" in result.stdout


def test_parse_writes_json(tmp_path, sample_csv):
    src = tmp_path / "responses.csv"
    src.write_text(sample_csv, encoding="utf-8")
    out = tmp_path / "responses.json"

    result = runner.invoke(cli, ["parse", str(src), "--json", "-o", str(out)])
    assert result.exit_code == 0
    assert "Wrote 3 responses" in result.stdout

    data = json.loads(out.read_text(encoding="utf-8"))
    assert {r["name"] for r in data} == {"Asha", "Ravi", "Meera"}
    assert data[0]["name"] == "Meera"


def test_parse_writes_csv(tmp_path, sample_csv):
    src = tmp_path / "responses.csv"
    src.write_text(sample_csv, encoding="utf-8")
    out = tmp_path / "flat.csv"

    result = runner.invoke(cli, ["parse", str(src), "-o", str(out)])
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").startswith("id,dateOfDrive")


def test_fetch_rejects_invalid_sheet():
    result = runner.invoke(cli, ["fetch", "--sheet", "not a sheet"])
    assert result.exit_code == 2
