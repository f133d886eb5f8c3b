"""Customer service: status lookups and CSV import of paid invoices."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from sermon_wizard.models.customer import STATUS_PAID, Customer

logger = logging.getLogger(__name__)

PLAN_DURATION_DAYS = 365

# Column headers of the billing platform's invoice export
COL_EMAIL = "Cliente / E-mail"
COL_NAME = "Cliente / Nome"
COL_COMPANY_NAME = "Cliente / Razão-Social"
COL_PHONE = "Cliente / Fones"
COL_CREATED = "Data de Criação"
COL_STATUS = "Status"

PAID_INVOICE_STATUS = "paga"

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class CustomerRecord:
    email: str
    name: str | None
    phone: str | None
    status: str
    expires_at: datetime


def normalize_phone(raw: str | None) -> str | None:
    """Keep the last 9 digits of a phone number; None when fewer than 8 digits."""
    if not raw or not isinstance(raw, str):
        return None
    digits = _NON_DIGITS.sub("", raw)
    if len(digits) < 8:
        return None
    return digits[-9:]


def parse_purchase_date(value: str) -> datetime:
    """Parse "DD/MM/YYYY HH:MM:SS" (time optional) as a UTC datetime.

    Raises:
        ValueError: If the value does not match the format.
    """
    value = value.strip()
    fmt = "%d/%m/%Y %H:%M:%S" if " " in value else "%d/%m/%Y"
    return datetime.strptime(value, fmt).replace(tzinfo=UTC)


def parse_customer_rows(
    rows: Iterable[Mapping[str, str | None]],
    plan_days: int = PLAN_DURATION_DAYS,
) -> list[CustomerRecord]:
    """Turn invoice export rows into paid customer records.

    Only rows with an e-mail, a creation date and status "Paga" are kept. The
    plan expires ``plan_days`` after the invoice creation date.
    """
    records: list[CustomerRecord] = []
    for line_no, row in enumerate(rows, start=2):  # line 1 is the header
        email = (row.get(COL_EMAIL) or "").strip()
        created = (row.get(COL_CREATED) or "").strip()
        status = (row.get(COL_STATUS) or "").strip()
        if not email or not created or status.lower() != PAID_INVOICE_STATUS:
            continue
        try:
            purchased_at = parse_purchase_date(created)
        except ValueError:
            logger.warning("Skipping line %d: unparseable date %r", line_no, created)
            continue
        name = (row.get(COL_NAME) or row.get(COL_COMPANY_NAME) or "").strip() or None
        records.append(
            CustomerRecord(
                email=email.lower(),
                name=name,
                phone=normalize_phone(row.get(COL_PHONE)),
                status=STATUS_PAID,
                expires_at=purchased_at + timedelta(days=plan_days),
            )
        )
    return records


def upsert_customers(db: Session, records: list[CustomerRecord]) -> int:
    """Insert or update customers by e-mail in one transaction.

    Either every record is written or none is: any failure rolls back and
    re-raises.
    """
    if not records:
        return 0
    try:
        for record in records:
            stmt = insert(Customer).values(
                email=record.email,
                name=record.name,
                phone=record.phone,
                status=record.status,
                expires_at=record.expires_at,
                updated_at=func.now(),
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[Customer.email],
                set_={
                    "name": stmt.excluded.name,
                    "phone": stmt.excluded.phone,
                    "status": stmt.excluded.status,
                    "expires_at": stmt.excluded.expires_at,
                    "updated_at": func.now(),
                },
            )
            db.execute(stmt)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Customer import failed; no changes were saved")
        raise
    logger.info("Imported/updated %d customers", len(records))
    return len(records)


def mark_status(db: Session, email: str, status: str) -> None:
    """Insert or update a single customer's status."""
    stmt = insert(Customer).values(email=email.lower(), status=status, updated_at=func.now())
    stmt = stmt.on_conflict_do_update(
        index_elements=[Customer.email],
        set_={"status": stmt.excluded.status, "updated_at": func.now()},
    )
    db.execute(stmt)
    db.commit()


def get_customer(db: Session, email: str) -> Customer | None:
    return db.query(Customer).filter(Customer.email == email.lower()).first()


def is_paid(db: Session, email: str) -> bool:
    """True if the customer exists, is marked paid and the plan has not expired."""
    customer = get_customer(db, email)
    return customer is not None and customer.is_active
