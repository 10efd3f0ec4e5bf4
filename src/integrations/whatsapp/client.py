"""
WhatsApp Cloud API messenger.
Posts messages to the Graph API ``/{phone_number_id}/messages`` endpoint.
"""

import logging
from typing import Any

import httpx

from src.config import settings
from src.integrations.whatsapp.base import (
    MAX_BUTTON_TITLE,
    MAX_ROW_DESCRIPTION,
    MAX_ROW_TITLE,
    BaseMessenger,
    Button,
    ListRow,
    TemplateArgs,
    validate_buttons,
    validate_rows,
    validate_skus,
)
from src.core.errors import ValidationError

logger = logging.getLogger(__name__)


class WhatsAppMessenger(BaseMessenger):
    """Messenger for the WhatsApp Cloud API."""

    def __init__(
        self,
        access_token: str | None = None,
        phone_number_id: str | None = None,
        api_version: str | None = None,
        catalog_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.access_token = access_token or settings.whatsapp_access_token
        self.phone_number_id = phone_number_id or settings.whatsapp_phone_number_id
        self.api_version = api_version or settings.whatsapp_api_version
        self.catalog_id = catalog_id or settings.whatsapp_catalog_id

        if not self.access_token or not self.phone_number_id:
            raise ValueError(
                "WhatsApp credentials not provided. "
                "Set WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID in .env file."
            )

        self._client = client or httpx.AsyncClient(timeout=settings.http_timeout)

    @property
    def messages_url(self) -> str:
        return (
            f"{settings.whatsapp_api_base}/{self.api_version}/"
            f"{self.phone_number_id}/messages"
        )

    async def _post(self, to: str, payload: dict[str, Any]) -> bool:
        """Send one message payload. Delivery errors are logged, not raised."""
        body = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to,
            **payload,
        }
        try:
            response = await self._client.post(
                self.messages_url,
                json=body,
                headers={"Authorization": f"Bearer {self.access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"WhatsApp rejected {payload.get('type')} message to {to}: "
                f"{e.response.status_code} {e.response.text[:300]}"
            )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send {payload.get('type')} message to {to}: {e}")
            return False

        logger.debug(f"Sent {payload.get('type')} message to {to}")
        return True

    async def send_text(self, to: str, body: str) -> bool:
        if not body:
            raise ValidationError("Text body must not be empty")
        return await self._post(to, {"type": "text", "text": {"body": body}})

    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        validate_buttons(buttons)
        return await self._post(to, {
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": body},
                "action": {
                    "buttons": [
                        {
                            "type": "reply",
                            "reply": {"id": button.id, "title": button.title[:MAX_BUTTON_TITLE]},
                        }
                        for button in buttons
                    ]
                },
            },
        })

    async def send_list(
        self,
        to: str,
        body: str,
        button_text: str,
        rows: list[ListRow],
        section_title: str | None = None,
    ) -> bool:
        validate_rows(rows)
        section_rows = []
        for row in rows:
            item = {"id": row.id, "title": row.title[:MAX_ROW_TITLE]}
            if row.description:
                item["description"] = row.description[:MAX_ROW_DESCRIPTION]
            section_rows.append(item)

        return await self._post(to, {
            "type": "interactive",
            "interactive": {
                "type": "list",
                "body": {"text": body},
                "action": {
                    "button": button_text[:MAX_BUTTON_TITLE],
                    "sections": [
                        {"title": (section_title or "Options")[:MAX_ROW_TITLE], "rows": section_rows}
                    ],
                },
            },
        })

    async def send_product_list(
        self,
        to: str,
        header: str,
        body: str,
        skus: list[str],
    ) -> bool:
        validate_skus(skus)
        if not self.catalog_id:
            raise ValidationError(
                "Catalog ID not configured. Set WHATSAPP_CATALOG_ID in .env file."
            )
        return await self._post(to, {
            "type": "interactive",
            "interactive": {
                "type": "product_list",
                "header": {"type": "text", "text": header},
                "body": {"text": body},
                "action": {
                    "catalog_id": self.catalog_id,
                    "sections": [
                        {
                            "title": header[:MAX_ROW_TITLE],
                            "product_items": [{"product_retailer_id": sku} for sku in skus],
                        }
                    ],
                },
            },
        })

    async def send_template(self, to: str, template: TemplateArgs) -> bool:
        if not template.name:
            raise ValidationError("Template name must not be empty")
        payload: dict[str, Any] = {
            "name": template.name,
            "language": {"code": template.language},
        }
        if template.body_parameters:
            payload["components"] = [
                {
                    "type": "body",
                    "parameters": [
                        {"type": "text", "text": value} for value in template.body_parameters
                    ],
                }
            ]
        return await self._post(to, {"type": "template", "template": payload})

    async def close(self) -> None:
        await self._client.aclose()
