"""WaSenderAPI client — outbound WhatsApp messages over HTTP.

Every send reports success as a bool. Transport errors, HTTP errors and
bad arguments are logged and turned into ``False``; nothing raises.
"""

import json
import logging
from typing import Optional

import httpx

logger = logging.getLogger("wagemini.wasender")

DEFAULT_API_URL = "https://wasenderapi.com/api/send-message"
_SEND_TIMEOUT = 20

# message type → payload key for its media URL, and whether a caption is allowed
_MEDIA_FIELDS = {
    "image": ("imageUrl", True),
    "video": ("videoUrl", True),
    "audio": ("audioUrl", False),
    "document": ("documentUrl", True),
}


def build_payload(
    recipient: str,
    content: Optional[str],
    message_type: str = "text",
    media_url: Optional[str] = None,
) -> Optional[dict]:
    """Build a send-message payload, or None if the combination is invalid."""
    payload: dict = {"to": recipient}

    if message_type == "text":
        if not content:
            return None
        payload["text"] = content
        return payload

    media = _MEDIA_FIELDS.get(message_type)
    if media is None or not media_url:
        return None

    url_field, allows_caption = media
    payload[url_field] = media_url
    if allows_caption and content:
        payload["text"] = content
    return payload


class WaSenderClient:
    """Send WhatsApp messages through WaSenderAPI."""

    def __init__(
        self,
        api_token: Optional[str],
        api_url: str = DEFAULT_API_URL,
        timeout: float = _SEND_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def send(self, recipient: str, text: str) -> bool:
        """Send one plain-text message."""
        return await self.send_message(recipient, text, "text")

    async def send_message(
        self,
        recipient: str,
        content: Optional[str],
        message_type: str = "text",
        media_url: Optional[str] = None,
    ) -> bool:
        """Send a text or media message.

        Args:
            recipient: Phone number (a personal JID is reduced to its number)
            content: Message text, or caption for image/video/document
            message_type: text, image, video, audio or document
            media_url: Public URL of the media (required for non-text types)

        Returns:
            True if WaSenderAPI accepted the message.
        """
        if not self.api_token:
            logger.error("WaSender API token is not set. Check WAGEMINI_WASENDER_API_TOKEN.")
            return False

        if recipient and "@s.whatsapp.net" in recipient:
            recipient = recipient.split("@")[0]

        payload = build_payload(recipient, content, message_type, media_url)
        if payload is None:
            if message_type != "text" and message_type in _MEDIA_FIELDS:
                logger.error(f"Media URL is required for message type '{message_type}'.")
            else:
                logger.error(f"Unsupported message type or missing content/media_url: {message_type}")
            return False

        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }
        logger.info(f"Attempting to send WhatsApp message. Payload: {json.dumps(payload, ensure_ascii=False)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.api_url, json=payload, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.error(
                f"Error sending WhatsApp message to {recipient} (Status: {code}): {e}. "
                f"Response: {e.response.text[:500]}"
            )
            if code == 422:
                logger.error(
                    "WaSenderAPI 422 Error: usually a payload problem ('to' format, "
                    "message content or media URL). Check the payload logged above."
                )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error sending WhatsApp message to {recipient}: {type(e).__name__}: {e}")
            return False

        logger.info(f"Message sent to {recipient}. Response: {resp.text[:200]}")
        return True
