"""Test the discount functions CLI."""
import json

from typer.testing import CliRunner
from cli.main import app

runner = CliRunner()

VOLUME_INPUT = {
    "discountNode": {"metafield": {"value": json.dumps({"percentage": 15, "vendors": ["Acme"], "option": True})}},
    "cart": {"lines": [
        {"quantity": 2, "merchandise": {"__typename": "ProductVariant", "id": "v1", "product": {"vendor": "Acme"}}},
        {"quantity": 1, "merchandise": {"__typename": "ProductVariant", "id": "v2", "product": {"vendor": "Other"}}},
    ]},
}


def test_run_from_stdin():
    result = runner.invoke(app, ["run", "volume-discount"], input=json.dumps(VOLUME_INPUT))
    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["discountApplicationStrategy"] == "FIRST"
    assert output["discounts"][0]["targets"] == [{"productVariant": {"id": "v1"}}]
    assert output["discounts"][0]["value"] == {"percentage": {"value": "15"}}


def test_run_from_file(tmp_path):
    path = tmp_path / "input.json"
    path.write_text(json.dumps(VOLUME_INPUT))
    result = runner.invoke(app, ["run", "volume-discount", "--input", str(path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["discounts"]


def test_run_explain():
    result = runner.invoke(app, ["run", "volume-discount", "--explain"], input=json.dumps(VOLUME_INPUT))
    assert result.exit_code == 0
    assert "volume-discount: discounted (1 of 2 lines qualify)" in result.output
    assert "line 1:" in result.output


def test_run_empty_result():
    result = runner.invoke(app, ["run", "tiers-discount"], input="{}")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"discountApplicationStrategy": "FIRST", "discounts": []}


def test_run_invalid_json():
    result = runner.invoke(app, ["run", "volume-discount"], input="{not json")
    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_run_unknown_function():
    result = runner.invoke(app, ["run", "nope"], input="{}")
    assert result.exit_code == 2
    assert "Function not found: nope" in result.output


def test_list():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert result.stdout.split() == ["tiers-discount", "volume-discount"]


def test_query():
    result = runner.invoke(app, ["query", "tiers-discount"])
    assert result.exit_code == 0
    assert result.stdout.startswith("query RunInput {")
    assert 'key: "function-configuration"' in result.stdout


def test_query_unknown_function():
    result = runner.invoke(app, ["query", "nope"])
    assert result.exit_code == 2


def test_run_invalid_utf8(tmp_path):
    path = tmp_path / "input.json"
    path.write_bytes(b"\xff\xfe{")
    result = runner.invoke(app, ["run", "volume-discount", "--input", str(path)])
    assert result.exit_code == 1
    assert "could not be read" in result.output


def test_run_out_of_range_fixed_amount_is_empty():
    data = {
        "discountNode": {"metafield": {"value": json.dumps({"optionDiscount": 1, "fixedAmount": "1e200000"})}},
        "cart": VOLUME_INPUT["cart"],
    }
    result = runner.invoke(app, ["run", "volume-discount"], input=json.dumps(data))
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"discountApplicationStrategy": "FIRST", "discounts": []}
