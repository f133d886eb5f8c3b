"""Database engine and session factory."""

from sermon_wizard.db.session import Base, SessionLocal, engine

__all__ = ["Base", "SessionLocal", "engine"]
