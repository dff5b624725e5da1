import json

from modelo210.cli import main


def test_imputation(capsys):
    code = main([
        "imputation",
        "--cadastral", "150000.00",
        "--purchase-date", "2020-01-15",
        "--year", "2024",
        "--as-of", "2024-12-31",
    ])
    out = capsys.readouterr().out
    assert code == 0
    assert "313.50" in out
    assert "× 1.1% × (365/365)" in out


def test_imputation_invalid_input(capsys):
    code = main(["imputation", "--cadastral", "0", "--purchase-date", "2020-01-15"])
    assert code == 1
    assert "Invalid cadastral value" in capsys.readouterr().err


def test_amortizable_value(tmp_path, capsys):
    path = tmp_path / "property.json"
    path.write_text(json.dumps({
        "property": {
            "property_id": 1,
            "client_id": 10,
            "cadastral_reference": "9872023VH5797S0001WX",
            "purchase_date": "2020-01-15",
            "purchase_price": "100000.00",
            "address": "Calle Mayor 1",
            "cadastral_total": "80000",
            "cadastral_land": "24000",
            "cadastral_construction": "56000",
        },
        "documents": [],
    }))
    code = main(["amortizable-value", str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert "70000.00" in out
    assert "2100.00€/año" in out


def test_rented_days_overlap(tmp_path, capsys):
    path = tmp_path / "contracts.json"
    contract = {"property_id": 1, "monthly_rent": "800", "tenant_name": "Jan"}
    path.write_text(json.dumps({
        "year": 2024,
        "contracts": [
            {**contract, "contract_id": 1, "start_date": "2024-01-01", "end_date": "2024-06-30"},
            {**contract, "contract_id": 2, "start_date": "2024-05-01", "end_date": "2024-12-31"},
        ],
    }))
    code = main(["rented-days", str(path)])
    assert code == 1
    assert "overlapping" in capsys.readouterr().err


def test_rented_days(tmp_path, capsys):
    path = tmp_path / "contracts.json"
    path.write_text(json.dumps({
        "year": 2023,
        "contracts": [{
            "contract_id": 7,
            "property_id": 1,
            "start_date": "2023-01-01",
            "end_date": "2023-03-31",
            "monthly_rent": "913.20",
            "tenant_name": "Jan",
            "tenant_surname": "Nowak",
        }],
    }))
    code = main(["rented-days", str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert "Jan Nowak" in out
    assert "90 / 365" in out
    assert "2700.00" in out


def test_missing_file(tmp_path, capsys):
    code = main(["rented-days", str(tmp_path / "nope.json")])
    assert code == 2
    assert "cannot read" in capsys.readouterr().err
