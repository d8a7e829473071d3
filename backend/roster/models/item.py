"""Item ORM - the `items` table of the relational store.

Invariants:
    - id is an integer primary key assigned by the database on insert
    - name is non-nullable, at most 255 characters
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from roster.db.base import Base


class Item(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
