import asyncio
import logging
import time
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from messaging.publishers import publish_cache_tags_invalidated

logger = logging.getLogger(__name__)


def members_cache_tag(team_id: str) -> str:
    return f"team:{team_id}:members"


class TagAwareCache:
    """
    Cache em memória em que cada item carrega um conjunto de tags; invalidar
    uma tag descarta todos os itens que a carregam.

    Itens gravados com ``max_age`` (segundos) expiram e passam a ser tratados
    como ausentes.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._items: Dict[str, Tuple[Any, FrozenSet[str], Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if not item:
            return None

        value, _, expires_at = item
        if expires_at is not None and self.clock() >= expires_at:
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: Any, tags: Iterable[str] = (), max_age: Optional[float] = None) -> None:
        expires_at = self.clock() + max_age if max_age is not None else None
        self._items[key] = (value, frozenset(tags), expires_at)

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        tags = set(tags)
        stale_keys = [key for key, (_, item_tags, _) in self._items.items() if item_tags & tags]
        for key in stale_keys:
            del self._items[key]
        return len(stale_keys)


render_cache = TagAwareCache()


class CacheTagsInvalidator:
    def __init__(self, cache: TagAwareCache = render_cache, publish: bool = True):
        self.cache = cache
        self.publish = publish

    def invalidate_tags(self, tags: Iterable[str]) -> None:
        tags = list(tags)
        removed = self.cache.invalidate_tags(tags)
        logger.debug("Cache tags %s invalidated (%d item(s) dropped).", tags, removed)

        if self.publish:
            run_async_publish(tags)


_background_tasks = set()


def run_async_publish(tags: list):
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("No running event loop, cache tags %s were not published to the other replicas.", tags)
        return

    task = loop.create_task(publish_cache_tags_invalidated(tags))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
