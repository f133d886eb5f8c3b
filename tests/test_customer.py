"""Tests for the customer service and the CSV import script.

These tests mock the database to avoid requiring a running PostgreSQL.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.dialects import postgresql

from sermon_wizard.models.customer import Customer
from sermon_wizard.scripts.import_customers import main, read_customer_csv
from sermon_wizard.services.customer import (
    CustomerRecord,
    is_paid,
    mark_status,
    normalize_phone,
    parse_customer_rows,
    parse_purchase_date,
    upsert_customers,
)

HEADER = "Cliente / E-mail;Cliente / Nome;Cliente / Razão-Social;Cliente / Fones;Data de Criação;Status"


def _row(email="Ana@Example.com", name="Ana", company="", phone="(11) 98765-4321",
         created="15/01/2026 10:30:00", status="Paga"):
    return {
        "Cliente / E-mail": email,
        "Cliente / Nome": name,
        "Cliente / Razão-Social": company,
        "Cliente / Fones": phone,
        "Data de Criação": created,
        "Status": status,
    }


def _mock_db_returning(customer):
    mock_session = MagicMock()
    mock_query = MagicMock()
    mock_filter = MagicMock()
    mock_filter.first.return_value = customer
    mock_query.filter.return_value = mock_filter
    mock_session.query.return_value = mock_query
    return mock_session


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestNormalizePhone:
    def test_keeps_last_nine_digits(self):
        assert normalize_phone("+55 (11) 98765-4321") == "987654321"

    def test_short_numbers_dropped(self):
        assert normalize_phone("1234-567") is None

    def test_eight_digits_kept(self):
        assert normalize_phone("3456-7890") == "34567890"

    @pytest.mark.parametrize("value", [None, "", "sem telefone"])
    def test_empty(self, value):
        assert normalize_phone(value) is None


class TestParsePurchaseDate:
    def test_with_time(self):
        assert parse_purchase_date("15/01/2026 10:30:00") == datetime(2026, 1, 15, 10, 30, tzinfo=UTC)

    def test_date_only(self):
        assert parse_purchase_date("15/01/2026") == datetime(2026, 1, 15, tzinfo=UTC)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_purchase_date("2026-01-15")


class TestParseCustomerRows:
    def test_paid_row(self):
        [record] = parse_customer_rows([_row()])
        assert record.email == "ana@example.com"
        assert record.name == "Ana"
        assert record.phone == "987654321"
        assert record.status == "paid"
        assert record.expires_at == datetime(2026, 1, 15, 10, 30, tzinfo=UTC) + timedelta(days=365)

    def test_status_case_insensitive(self):
        assert len(parse_customer_rows([_row(status="PAGA")])) == 1

    @pytest.mark.parametrize(
        "row",
        [
            _row(status="Pendente"),
            _row(email=""),
            _row(created=""),
            _row(created="ontem"),
        ],
    )
    def test_rows_skipped(self, row):
        assert parse_customer_rows([row]) == []

    def test_company_name_fallback(self):
        [record] = parse_customer_rows([_row(name="", company="Igreja Central")])
        assert record.name == "Igreja Central"

    def test_custom_plan_days(self):
        [record] = parse_customer_rows([_row(created="01/03/2026")], plan_days=30)
        assert record.expires_at == datetime(2026, 3, 31, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Database writes (mocked session)
# ---------------------------------------------------------------------------


def _record(email="ana@example.com") -> CustomerRecord:
    return CustomerRecord(
        email=email,
        name="Ana",
        phone="987654321",
        status="paid",
        expires_at=datetime(2027, 1, 15, tzinfo=UTC),
    )


class TestUpsertCustomers:
    def test_executes_one_upsert_per_record_and_commits(self):
        db = MagicMock()
        count = upsert_customers(db, [_record(), _record("bia@example.com")])
        assert count == 2
        assert db.execute.call_count == 2
        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_statement_is_on_conflict_update(self):
        db = MagicMock()
        upsert_customers(db, [_record()])
        stmt = db.execute.call_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "INSERT INTO customers" in sql
        assert "ON CONFLICT (email) DO UPDATE" in sql

    def test_rollback_on_error(self):
        db = MagicMock()
        db.execute.side_effect = [None, RuntimeError("boom")]
        with pytest.raises(RuntimeError):
            upsert_customers(db, [_record(), _record("bia@example.com")])
        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_nothing_to_do(self):
        db = MagicMock()
        assert upsert_customers(db, []) == 0
        db.execute.assert_not_called()


class TestStatus:
    def test_mark_status_lowercases_email(self):
        db = MagicMock()
        mark_status(db, "Ana@Example.com", "paid")
        stmt = db.execute.call_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert params["email"] == "ana@example.com"
        db.commit.assert_called_once()

    def test_is_paid_active(self):
        customer = Customer(
            email="ana@example.com",
            status="paid",
            expires_at=datetime.now(UTC) + timedelta(days=10),
        )
        assert is_paid(_mock_db_returning(customer), "ana@example.com") is True

    def test_is_paid_expired(self):
        customer = Customer(
            email="ana@example.com",
            status="paid",
            expires_at=datetime.now(UTC) - timedelta(days=1),
        )
        assert is_paid(_mock_db_returning(customer), "ana@example.com") is False

    def test_is_paid_unpaid_or_unknown(self):
        assert is_paid(_mock_db_returning(Customer(email="x", status="unpaid")), "x") is False
        assert is_paid(_mock_db_returning(None), "x") is False


# ---------------------------------------------------------------------------
# Import script
# ---------------------------------------------------------------------------


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "lista-anual.csv"
    lines = [
        HEADER,
        "ana@example.com;Ana;;(11) 98765-4321;15/01/2026 10:30:00;Paga",
        "bia@example.com;Bia;;;16/01/2026 09:00:00;Cancelada",
        "caio@example.com;;Caio ME;11 2345-6789;17/01/2026;paga",
    ]
    path.write_text("\ufeff" + "\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_read_customer_csv(csv_file):
    records = read_customer_csv(csv_file)
    assert [r.email for r in records] == ["ana@example.com", "caio@example.com"]
    assert records[1].name == "Caio ME"


def test_main_dry_run_does_not_touch_db(csv_file, capsys):
    with patch("sermon_wizard.scripts.import_customers.upsert_customers") as mock_upsert:
        assert main(["--csv", str(csv_file), "--dry-run"]) == 0
    mock_upsert.assert_not_called()
    assert "2 paid customers" in capsys.readouterr().out


def test_main_imports(csv_file):
    mock_db = MagicMock()
    with patch("sermon_wizard.db.session.SessionLocal", return_value=mock_db), \
         patch("sermon_wizard.scripts.import_customers.upsert_customers", return_value=2) as mock_upsert:
        assert main(["--csv", str(csv_file)]) == 0
    assert len(mock_upsert.call_args.args[1]) == 2
    mock_db.close.assert_called_once()


def test_main_missing_file(tmp_path):
    assert main(["--csv", str(tmp_path / "missing.csv")]) == 1
