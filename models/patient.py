"""
Domain model and table definition for patients.
"""
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Column, Integer, MetaData, String, Table

metadata = MetaData()

# sqlite_autoincrement keeps ids from being reused when the suite runs on SQLite;
# MySQL's AUTO_INCREMENT already behaves that way.
patients = Table(
    "patients",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("patient_number", String(100), nullable=False),
    sqlite_autoincrement=True,
)


@dataclass(frozen=True)
class Patient:
    """A row of the patients table."""

    id: int
    name: str
    patient_number: str

    @classmethod
    def from_row(cls, row: Any) -> "Patient":
        """
        Create a Patient from a result row.

        Args:
            row: A SQLAlchemy Row with id, name and patient_number columns.
        """
        mapping = row._mapping
        return cls(
            id=mapping["id"],
            name=mapping["name"],
            patient_number=mapping["patient_number"],
        )
