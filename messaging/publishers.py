import json
import logging
from datetime import datetime, timezone

import aio_pika

from shared.config import RABBITMQ_URL

logger = logging.getLogger(__name__)

CACHE_TAGS_EXCHANGE = "cache_tags_exchange"


def build_cache_tags_message(tags: list) -> dict:
    return {
        "tags": list(tags),
        "invalidated_at": datetime.now(timezone.utc).isoformat(),
    }


async def publish_cache_tags_invalidated(tags: list):
    """
    Publica as tags de cache invalidadas para que as outras réplicas do
    serviço descartem o cache local.

    Falhas de conexão ou publicação são apenas registradas no log.
    """
    connection = None
    try:
        connection = await aio_pika.connect_robust(RABBITMQ_URL)

        async with connection.channel() as channel:
            exchange = await channel.declare_exchange(
                CACHE_TAGS_EXCHANGE,
                aio_pika.ExchangeType.FANOUT,
                durable=True
            )

            message_data = build_cache_tags_message(tags)

            message = aio_pika.Message(
                body=json.dumps(message_data).encode(),
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.NOT_PERSISTENT
            )

            await exchange.publish(message, routing_key="")
            logger.info("Sent cache tags invalidation: %s", message_data)

    except aio_pika.exceptions.AMQPConnectionError as e:
        logger.error("RabbitMQ connection error: %s", e)
    except Exception as e:
        logger.error("Failed to publish cache tags invalidation: %s", e)
    finally:
        if connection and not connection.is_closed:
            await connection.close()
