from sqlalchemy import Column, Integer, String

from shared.database import Base


class User(Base):
    __tablename__ = "users"

    uid: int = Column(Integer, primary_key=True, autoincrement=True)
    name: str = Column(String(60), nullable=False, unique=True)
    mail: str = Column(String(254), nullable=True, index=True)

    def label(self) -> str:
        return self.name
