from urllib.parse import quote

from sqlalchemy import Column, String

from shared.database import Base


class Team(Base):
    __tablename__ = "teams"

    id: str = Column(String(100), primary_key=True)
    display_name: str = Column(String(255), nullable=False)

    def label(self) -> str:
        return self.display_name or self.id

    def to_url(self, rel: str = "canonical") -> str:
        team_id = quote(self.id, safe='')
        if rel == "canonical":
            return f"/api/v1/teams/{team_id}"
        if rel == "members":
            return f"/api/v1/teams/{team_id}/members/"
        raise ValueError(f"Unknown link relation '{rel}' for team {self.id}.")
