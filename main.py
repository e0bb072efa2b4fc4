from contextlib import asynccontextmanager

import asyncio
import logging

import uvicorn

from fastapi import FastAPI

from messaging.consumers import main_consumer
from shared.config import LOG_LEVEL
from shared.database import create_all
from shared.exceptions import NotFound, TeamMembershipError
from shared.exceptions_handler import not_found_exception_handler, team_membership_exception_handler

from teams.routers import team_members_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

logger = logging.getLogger(__name__)

consumer_task = None


@asynccontextmanager
async def lifespan_manager(app: FastAPI):
    global consumer_task
    create_all()

    logger.info("Lifespan: starting the cache tags consumer...")
    try:
        consumer_task = asyncio.create_task(main_consumer())
    except Exception as e:
        logger.critical("Lifespan: failed to start the consumer task: %s", e)

    yield

    logger.info("Lifespan: shutting down, cancelling the consumer task...")
    if consumer_task and not consumer_task.done():
        consumer_task.cancel()
        try:
            await consumer_task
        except asyncio.CancelledError:
            logger.info("Lifespan: consumer task cancelled.")
        except Exception as e:
            logger.error("Lifespan: error while cancelling the consumer task: %s", e)


app = FastAPI(lifespan=lifespan_manager)

app.include_router(team_members_router.router)

app.add_exception_handler(NotFound, not_found_exception_handler)
app.add_exception_handler(TeamMembershipError, team_membership_exception_handler)


@app.get("/health")
async def health_check():
    task_status = "not started or already finished"
    if consumer_task:
        if consumer_task.done():
            if consumer_task.cancelled():
                task_status = "cancelled"
            elif consumer_task.exception():
                task_status = f"failed with exception: {consumer_task.exception()}"
            else:
                task_status = "finished"
        else:
            task_status = "running"

    return {
        "service": "teams_service",
        "status": "healthy_api",
        "consumer_task_status": task_status
    }

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8003, proxy_headers=True)
