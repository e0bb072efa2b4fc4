import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.database import Base
from teams.entity_types import EntityTypeManager
from teams.models import Developer, Team, User


class FakeTeamMembershipManager:
    def __init__(self, members=None):
        self.members = {team_id: list(emails) for team_id, emails in (members or {}).items()}
        self.get_error = None
        self.remove_error = None
        self.get_members_calls = []
        self.remove_members_calls = []

    async def get_members(self, team_id):
        self.get_members_calls.append(team_id)
        if self.get_error:
            raise self.get_error
        return list(self.members.get(team_id, []))

    async def remove_members(self, team_id, developers):
        self.remove_members_calls.append((team_id, list(developers)))
        if self.remove_error:
            raise self.remove_error
        self.members[team_id] = [email for email in self.members.get(team_id, []) if email not in developers]


class FakeCacheTagsInvalidator:
    def __init__(self):
        self.calls = []

    def invalidate_tags(self, tags):
        self.calls.append(list(tags))


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()

    session.add_all([
        Team(id="t1", display_name="Team One"),
        Developer(email="a@x.com", first_name="Alice", last_name="Smith"),
        Developer(email="b@x.com"),
        Developer(email="c@x.com", first_name="Carol"),
        User(name="alice", mail="a@x.com"),
    ])
    session.commit()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def entity_type_manager(db_session):
    return EntityTypeManager(db_session)


@pytest.fixture
def membership_manager():
    return FakeTeamMembershipManager({"t1": ["a@x.com", "b@x.com"]})


@pytest.fixture
def cache_tags_invalidator():
    return FakeCacheTagsInvalidator()
