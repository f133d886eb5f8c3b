"""SQLAlchemy models."""

from sermon_wizard.models.customer import Customer

__all__ = ["Customer"]
