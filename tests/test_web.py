"""
Tests for the Flask simulator pages and endpoints.
"""

from datetime import date

import pytest

from loan_sim.formatter import parse_schedule_csv
from loan_sim_web.app import validate_config

DETAILED_FORM = {
    "form": "detailed",
    "precio2": "$100,000",
    "enganche2": "0",
    "plazo2": "12",
    "tasa2": "1",
}


class TestIndex:
    """Test the simulator page."""

    def test_get_renders_placeholders(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert "Calcula para ver tu plan." in body
        assert str(date.today().year) in body

    def test_quick_simulator(self, client):
        response = client.post(
            "/",
            data={"form": "quick", "precio": "$350,000", "enganche": "$50,000", "plazo": "24", "tasa": "0"},
        )
        body = response.get_data(as_text=True)
        assert "Mensualidad estimada: $12,500.00 · Total aprox: $350,000.00" in body

    def test_quick_simulator_incomplete(self, client):
        response = client.post(
            "/",
            data={"form": "quick", "precio": "", "enganche": "", "plazo": "24", "tasa": "1"},
        )
        assert "Completa los datos para calcular." in response.get_data(as_text=True)

    def test_detailed_simulator(self, client):
        response = client.post("/", data=DETAILED_FORM)
        body = response.get_data(as_text=True)
        assert "Mensualidad estimada: $8,884.88 · Monto: $100,000.00" in body
        assert "Monto $100,000.00 · Tasa 1% · Plazo 12m" in body
        assert "$92,115.12" in body
        assert "Calcula para ver tu plan." not in body

    def test_detailed_simulator_incomplete(self, client):
        response = client.post("/", data=dict(DETAILED_FORM, tasa2=""))
        body = response.get_data(as_text=True)
        assert "Completa los datos para calcular." in body
        assert "Calcula para ver tu plan." in body


class TestExport:
    """Test the CSV download."""

    def test_export_csv(self, client):
        response = client.post("/export.csv", data=DETAILED_FORM)
        assert response.status_code == 200
        assert response.headers["Content-Type"].startswith("text/csv")
        assert "tabla_amortizacion.csv" in response.headers["Content-Disposition"]
        text = response.get_data(as_text=True)
        assert text.startswith("#,Pago,Interés,Capital,Saldo\n1,8884.88,1000.00,7884.88,92115.12")
        assert len(parse_schedule_csv(text)) == 12

    def test_export_without_data(self, client):
        response = client.post("/export.csv", data=dict(DETAILED_FORM, plazo2="0"))
        assert response.status_code == 204
        assert response.get_data() == b""


class TestApi:
    """Test the JSON endpoint."""

    def test_calculate_json(self, client):
        response = client.post(
            "/api/calculate",
            json={"price": "100,000", "down_payment": 0, "term": 12, "rate": 1},
        )
        assert response.status_code == 200
        data = response.get_json()
        assert abs(data["monthly_payment"] - 8884.88) < 0.005
        assert len(data["schedule"]) == 12
        assert data["schedule"][0]["period"] == 1
        assert data["negative_amortization"] is False

    def test_calculate_insufficient(self, client):
        response = client.post("/api/calculate", json={"price": "0", "term": 12, "rate": 1})
        assert response.status_code == 422
        assert response.get_json()["error"] == "Completa los datos para calcular."


class TestOversizedInput:
    """Test that oversized figures never turn into a server error."""

    def test_huge_rate(self, client):
        response = client.post("/", data=dict(DETAILED_FORM, precio2="1000", tasa2="1e300"))
        assert response.status_code == 200
        assert "Mensualidad estimada:" in response.get_data(as_text=True)

    def test_huge_term(self, client):
        response = client.post("/", data=dict(DETAILED_FORM, precio2="1000", plazo2="2000", tasa2="50"))
        assert response.status_code == 200
        assert "Mensualidad estimada: $500.00" in response.get_data(as_text=True)

    def test_overflowing_payment_is_insufficient(self, client):
        response = client.post("/export.csv", data=dict(DETAILED_FORM, precio2="1e10", tasa2="1e306"))
        assert response.status_code == 204


class TestConfig:
    """Test start-up validation of settings."""

    def test_defaults_accepted(self):
        validate_config({"GROUPING_SEPARATOR": ",", "DECIMAL_SEPARATOR": ".", "CSV_LABELS": "es"})

    def test_unknown_csv_labels(self):
        with pytest.raises(ValueError):
            validate_config({"GROUPING_SEPARATOR": ",", "DECIMAL_SEPARATOR": ".", "CSV_LABELS": "fr"})

    def test_identical_separators(self):
        with pytest.raises(ValueError):
            validate_config({"GROUPING_SEPARATOR": ".", "DECIMAL_SEPARATOR": ".", "CSV_LABELS": "es"})
