from fastapi import Depends

from sqlalchemy.orm import Session

from services.cache_tags import CacheTagsInvalidator, TagAwareCache, render_cache
from services.team_membership_manager import TeamMembershipManager
from shared.database import SessionLocal
from shared.translation import Translator
from teams.entity_types import EntityTypeManager


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_entity_type_manager(db: Session = Depends(get_db)) -> EntityTypeManager:
    return EntityTypeManager(db)


def get_team_membership_manager() -> TeamMembershipManager:
    return TeamMembershipManager()


def get_render_cache() -> TagAwareCache:
    return render_cache


def get_cache_tags_invalidator(cache: TagAwareCache = Depends(get_render_cache)) -> CacheTagsInvalidator:
    return CacheTagsInvalidator(cache)


def get_translator() -> Translator:
    return Translator()
