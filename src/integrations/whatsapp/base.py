"""
Base interface for outbound messengers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from src.core.errors import ValidationError

MAX_BUTTONS = 3
MAX_BUTTON_TITLE = 20
MAX_LIST_ROWS = 10
MAX_ROW_TITLE = 24
MAX_ROW_DESCRIPTION = 72
MAX_PRODUCT_ITEMS = 30


@dataclass(frozen=True)
class Button:
    """Reply button."""
    id: str
    title: str


@dataclass(frozen=True)
class ListRow:
    """Row of an interactive list."""
    id: str
    title: str
    description: str | None = None


@dataclass
class TemplateArgs:
    """Pre-approved template message."""
    name: str
    language: str = "en_US"
    body_parameters: list[str] = field(default_factory=list)


def validate_buttons(buttons: list[Button]) -> None:
    """Reject button sets the platform would refuse."""
    if not buttons:
        raise ValidationError("At least one button is required")
    if len(buttons) > MAX_BUTTONS:
        raise ValidationError(
            f"At most {MAX_BUTTONS} buttons are allowed, got {len(buttons)}"
        )
    ids = [button.id for button in buttons]
    if len(set(ids)) != len(ids):
        raise ValidationError(f"Button IDs must be unique: {ids}")


def validate_rows(rows: list[ListRow]) -> None:
    if not rows:
        raise ValidationError("A list needs at least one row")
    if len(rows) > MAX_LIST_ROWS:
        raise ValidationError(f"At most {MAX_LIST_ROWS} list rows are allowed, got {len(rows)}")


def validate_skus(skus: list[str]) -> None:
    if not skus:
        raise ValidationError("A product list needs at least one SKU")
    if len(skus) > MAX_PRODUCT_ITEMS:
        raise ValidationError(
            f"At most {MAX_PRODUCT_ITEMS} products are allowed, got {len(skus)}"
        )


class BaseMessenger(ABC):
    """Abstract base class for outbound messengers.

    Send methods return ``True`` when the platform accepted the message and
    ``False`` when delivery failed; delivery failures are logged, not raised.
    Payload problems raise ``ValidationError`` before any network call.
    """

    @abstractmethod
    async def send_text(self, to: str, body: str) -> bool:
        pass

    @abstractmethod
    async def send_buttons(self, to: str, body: str, buttons: list[Button]) -> bool:
        pass

    @abstractmethod
    async def send_list(
        self,
        to: str,
        body: str,
        button_text: str,
        rows: list[ListRow],
        section_title: str | None = None,
    ) -> bool:
        pass

    @abstractmethod
    async def send_product_list(
        self,
        to: str,
        header: str,
        body: str,
        skus: list[str],
    ) -> bool:
        pass

    @abstractmethod
    async def send_template(self, to: str, template: TemplateArgs) -> bool:
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
