"""Check the status of several messages concurrently with the async client."""

import asyncio
import sys

from telesign import AsyncMessagingClient, Config
from telesign.utils.logger import logger


async def check_statuses(reference_ids: list[str]) -> None:
    if not Config.validate():
        logger.error("Set TELESIGN_CUSTOMER_ID and TELESIGN_API_KEY in .env file")
        return

    async with AsyncMessagingClient() as client:
        responses = await asyncio.gather(*(client.status(ref) for ref in reference_ids))

    for reference_id, response in zip(reference_ids, responses):
        logger.info(
            f"{reference_id}: {response.status_code} {response.json.get('status', {})}"
        )


if __name__ == "__main__":
    asyncio.run(check_statuses(sys.argv[1:]))
