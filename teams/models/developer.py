from sqlalchemy import Column, String

from shared.database import Base


class Developer(Base):
    __tablename__ = "developers"

    email: str = Column(String(255), primary_key=True)
    first_name: str = Column(String(100), nullable=True)
    last_name: str = Column(String(100), nullable=True)

    def label(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.email
