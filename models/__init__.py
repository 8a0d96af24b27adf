"""SQLAlchemy models for Draftpad."""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

from models.setting import Setting

__all__ = ["Base", "Setting"]
