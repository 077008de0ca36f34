"""SQLAlchemy declarative Base shared by all Venio models."""

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; repr shows the primary key only, never credentials."""

    def __repr__(self) -> str:
        identity = inspect(self).identity
        key = ",".join(str(v) for v in identity) if identity else "transient"
        return f"<{type(self).__name__} {key}>"
