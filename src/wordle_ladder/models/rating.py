from sqlmodel import Field, SQLModel


class PlayerRating(SQLModel, table=True):
    """Current Elo rating for a participant."""

    __tablename__ = "ratings"

    participant: str = Field(primary_key=True)
    rating: float = 1500.0
