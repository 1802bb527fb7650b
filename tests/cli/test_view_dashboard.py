"""
Tests for the dashboard CLI (scripts/view_dashboard.py).
"""

import json
from decimal import Decimal

from scripts.view_dashboard import fmt_money, main

SNAPSHOT = {
    "employees": [{"id": "emp-1", "name": "Ana", "role": "Mechanic",
                   "monthly_salary": 1600, "monthly_hours": 160}],
    "services": [{"id": "svc-1", "service_no": "R-1", "service_date": "2024-03-05",
                  "service_type": "Brakes"}],
    "time_entries": [{"id": "te-1", "service_id": "svc-1", "employee_id": "emp-1", "hours": 8}],
    "fixed_expenses": [{"id": "fx-1", "name": "Rent", "amount_monthly": 500}],
    "settings": {"id": 1, "hourly_rate": 25},
}


def _snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path


class TestFormatting:

    def test_positive(self):
        assert fmt_money(Decimal("1234.5")) == " 1,234.50 "

    def test_negative_in_parentheses(self):
        assert fmt_money(Decimal("-380")) == "(380.00)"

    def test_nan_is_not_negative(self):
        assert fmt_money(Decimal("NaN")) == " NaN "


class TestMain:

    def test_prints_dashboard(self, tmp_path, capsys):
        code = main(["--snapshot", str(_snapshot_file(tmp_path)), "--month", "2024-03"])
        out = capsys.readouterr().out
        assert code == 0
        assert "2024-03" in out
        assert "(380.00)" in out
        assert "LOSS" in out

    def test_json_output(self, tmp_path, capsys):
        code = main(["--snapshot", str(_snapshot_file(tmp_path)), "--month", "2024-03", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["totals"]["net_profit"] == "-380"
        assert data["totals"]["is_profitable"] is False

    def test_bad_month_fails(self, tmp_path, capsys):
        code = main(["--snapshot", str(_snapshot_file(tmp_path)), "--month", "2024-3"])
        assert code == 1
        assert "Invalid month key" in capsys.readouterr().err

    def test_missing_snapshot_fails(self, tmp_path, capsys):
        code = main(["--snapshot", str(tmp_path / "absent.json")])
        assert code == 1

    def test_malformed_config_fails(self, tmp_path, capsys):
        config = tmp_path / "shop.yaml"
        config.write_text("config_id: [unclosed\n", encoding="utf-8")
        code = main([
            "--config", str(config),
            "--snapshot", str(_snapshot_file(tmp_path)),
            "--month", "2024-03",
        ])
        assert code == 1
        assert "Cannot load configuration" in capsys.readouterr().err

    def test_non_utf8_snapshot_fails(self, tmp_path, capsys):
        path = tmp_path / "snapshot.json"
        path.write_bytes(b'{"services": "\xff"}')
        code = main(["--snapshot", str(path), "--month", "2024-03"])
        assert code == 1
        assert "ERROR" in capsys.readouterr().err
