from datetime import timedelta

from sqlalchemy import BigInteger, Column, Integer, String
from sqlmodel import Field, SQLModel

from ...constants import TABLE_NAME
from ...domain.constants import TICKS_PER_MICROSECOND
from ...domain.entities import TeaVariety as DomainTeaVariety


def _to_ticks(steep_time: timedelta) -> int:
    return (steep_time // timedelta(microseconds=1)) * TICKS_PER_MICROSECOND


class TeaRecord(SQLModel, table=True):  # type: ignore[call-arg]
    """One row of the TeaVarieties table.

    Column names and the tick-based Steeptime column match the database
    files written by the .NET tea apps (TimeSpan ticks).
    """

    __tablename__ = TABLE_NAME  # type: ignore[assignment]
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(
        default=None,
        sa_column=Column("ID", Integer, primary_key=True, autoincrement=True),
    )
    name: str = Field(sa_column=Column("Name", String, unique=True, nullable=False))
    # 100ns ticks
    steep_time_ticks: int = Field(sa_column=Column("Steeptime", BigInteger, nullable=False))
    brew_temp: int = Field(sa_column=Column("Brewtemp", Integer, nullable=False))

    @classmethod
    def from_domain(cls, tea: DomainTeaVariety) -> "TeaRecord":
        """Convert domain entity to persistence model."""
        return cls(
            id=tea.id or None,
            name=tea.name,
            steep_time_ticks=_to_ticks(tea.steep_time),
            brew_temp=tea.brew_temp,
        )

    def update_from_domain(self, tea: DomainTeaVariety) -> None:
        """Copy every column except the primary key from a domain entity."""
        self.name = tea.name
        self.steep_time_ticks = _to_ticks(tea.steep_time)
        self.brew_temp = tea.brew_temp

    def to_domain(self) -> DomainTeaVariety:
        """Convert persistence model to domain entity."""
        return DomainTeaVariety(
            id=self.id,
            name=self.name,
            steep_time=timedelta(
                microseconds=self.steep_time_ticks // TICKS_PER_MICROSECOND
            ),
            brew_temp=self.brew_temp,
        )
