"""Send an SMS and poll its delivery status with the blocking client."""

import sys

from telesign import Config, MessagingClient
from telesign.utils.logger import logger


def send_message(phone_number: str) -> None:
    """Send one ARN message and log its status."""
    if not Config.validate():
        logger.error(
            "API credentials not found!\n"
            "Please set TELESIGN_CUSTOMER_ID and TELESIGN_API_KEY in .env file"
        )
        return

    logger.info(f"REST URL: {Config.get_rest_url()}")

    with MessagingClient() as client:
        response = client.message(
            phone_number, "You have a dentist appointment at 2:15pm", "ARN"
        )
        if not response.ok:
            logger.error(f"Message rejected: {response.status_code} - {response.body}")
            return

        reference_id = response.json.get("reference_id")
        logger.info(f"Message sent - reference_id: {reference_id}")

        status = client.status(reference_id)
        logger.info(f"Status: {status.json.get('status', {})}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python examples/send_message.py <phone_number>")
        sys.exit(1)
    send_message(sys.argv[1])
