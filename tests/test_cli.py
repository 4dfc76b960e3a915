import json

from typer.testing import CliRunner
from rnokpp.__main__ import main
from rnokpp.cli import app

runner = CliRunner()

def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "TIN validator" in result.stdout

def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "rnokpp" in result.stdout

def test_check_valid():
    result = runner.invoke(app, ["check", "3036045681", "--dob", "1983-02-14", "--strict"])
    assert result.exit_code == 0
    assert "valid" in result.stdout
    assert "female" in result.stdout

def test_check_json():
    result = runner.invoke(app, ["check", "3036 045 681", "--json", "--now", "2026-10-18"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["error"] is None
    assert payload["result"]["tin"] == "3036045681"
    assert payload["result"]["birth_date"].startswith("1983-02-14")

def test_check_bad_checksum_exits_one():
    result = runner.invoke(app, ["check", "1234567890"])
    assert result.exit_code == 1
    assert "invalid" in result.stdout

def test_check_rejected_exits_two():
    result = runner.invoke(app, ["check", "1111111111", "--json"])
    assert result.exit_code == 2
    payload = json.loads(result.stdout)
    assert payload["error"]["kind"] == "AllSame"
    assert payload["result"]["tin"] == "1111111111"

def test_check_strict_mismatch():
    result = runner.invoke(app, ["check", "2941156717", "--dob", "1980-07-11", "--strict"])
    assert result.exit_code == 2
    assert "DOBMismatch" in result.stdout

def test_check_with_config_file(tmp_path):
    p = tmp_path / "rnokpp.yaml"
    p.write_text("extra_rules: [checksum]\n")
    result = runner.invoke(app, ["--config", str(p), "check", "3036045682"])
    assert result.exit_code == 2
    assert "Checksum" in result.stdout

def test_decode():
    result = runner.invoke(app, ["decode", "3036045681"])
    assert result.exit_code == 0
    assert "1983-02-14" in result.stdout
    assert "female" in result.stdout
    assert "30360" in result.stdout

def test_decode_too_short():
    result = runner.invoke(app, ["decode", "12"])
    assert result.exit_code == 2

def test_main_is_callable():
    assert callable(main)

def test_check_reads_config_from_context():
    result = runner.invoke(app, ["check", "3036045681", "--now", "2026-10-18"])
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert result.exit_code == 0

def test_check_aware_dob_is_compared_in_utc():
    # 01:00 at +03:00 is still 1983-02-13 in UTC.
    result = runner.invoke(app, ["check", "3036045681", "--dob", "1983-02-14T01:00:00+0300", "--strict"])
    assert result.exit_code == 2
    assert "DOBMismatch" in result.stdout

    result = runner.invoke(app, ["check", "3036045681", "--dob", "1983-02-14T10:00:00+0200", "--strict"])
    assert result.exit_code == 0

def test_check_unknown_zone_is_a_usage_error():
    result = runner.invoke(app, ["check", "3036045681", "--tz", "Europe"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, OSError)

def test_missing_config_file_is_a_usage_error(tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "check", "3036045681"])
    assert result.exit_code == 2
    assert not isinstance(result.exception, OSError)

def test_malformed_config_is_a_usage_error(tmp_path):
    as_list = tmp_path / "list.yaml"
    as_list.write_text("- 1\n- 2\n")
    broken = tmp_path / "broken.yaml"
    broken.write_text("max_age: [1, 2\n")
    for p in (as_list, broken):
        result = runner.invoke(app, ["--config", str(p), "check", "3036045681"])
        assert result.exit_code == 2
        assert not isinstance(result.exception, TypeError)
