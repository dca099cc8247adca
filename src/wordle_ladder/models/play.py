from sqlmodel import Field, SQLModel


class Play(SQLModel, table=True):
    """One participant's outcome for one puzzle."""

    __tablename__ = "plays"

    puzzle_id: str = Field(primary_key=True)
    participant: str = Field(primary_key=True)
    attempts: int | None = None  # None = failed (X/6)
    points: int
