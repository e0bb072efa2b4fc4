import asyncio
import json
import logging

import aio_pika

from messaging.publishers import CACHE_TAGS_EXCHANGE
from services.cache_tags import render_cache
from shared.config import RABBITMQ_URL

logger = logging.getLogger(__name__)


def handle_cache_tags_message(data: dict) -> int:
    if not isinstance(data, dict):
        raise ValueError("the cache tags message must be a JSON object")

    tags = data.get("tags")
    if not isinstance(tags, list):
        raise ValueError("'tags' must be a list in the cache tags message")

    # Só o cache local: republicar faria as réplicas entrarem em loop.
    return render_cache.invalidate_tags(tags)


async def on_message(message: aio_pika.IncomingMessage) -> None:
    async with message.process():
        try:
            data = json.loads(message.body.decode())
            removed = handle_cache_tags_message(data)
            logger.info("Cache tags %s invalidated by another replica (%d item(s) dropped).", data["tags"], removed)

        except json.JSONDecodeError as e:
            logger.error("Failed to decode cache tags message: %s. The message will be rejected.", e)
            raise
        except ValueError as e:
            logger.error("Invalid cache tags message: %s", e)
            raise


async def main_consumer():
    retry_delay = 10
    while True:
        connection = None
        try:
            logger.info("Consumer: connecting to RabbitMQ at %s...", RABBITMQ_URL)
            connection = await aio_pika.connect_robust(RABBITMQ_URL, timeout=15)

            async with connection:
                channel = await connection.channel()
                await channel.set_qos(prefetch_count=10)

                exchange = await channel.declare_exchange(
                    CACHE_TAGS_EXCHANGE,
                    aio_pika.ExchangeType.FANOUT,
                    durable=True
                )

                # Fila exclusiva: cada réplica recebe sua própria cópia.
                queue = await channel.declare_queue(exclusive=True, auto_delete=True)
                await queue.bind(exchange)

                await queue.consume(on_message)
                logger.info("Consumer: waiting for cache tags invalidations.")

                await asyncio.Future()

        except asyncio.CancelledError:
            logger.info("Consumer: cancelled.")
            raise
        except aio_pika.exceptions.AMQPConnectionError as e:
            logger.error("Consumer: RabbitMQ connection error: %s. Retrying in %ss.", e, retry_delay)
        except Exception as e:
            logger.error("Consumer: unexpected error: %s. Retrying in %ss.", e, retry_delay)
        finally:
            if connection and not connection.is_closed:
                await connection.close()

        await asyncio.sleep(retry_delay)
