from typing import Any

from pydantic import BaseModel, ConfigDict

ORDER_CREATED = "order_created"


class LemonSqueezyMeta(BaseModel):
    model_config = ConfigDict(extra="allow")

    event_name: str
    custom_data: dict[str, Any] | None = None

    @property
    def event_id(self) -> str | None:
        if not self.custom_data:
            return None
        event_id = self.custom_data.get("event_id")
        return str(event_id) if event_id else None


class LemonSqueezyWebhook(BaseModel):
    """The parts of a Lemon Squeezy webhook body we rely on."""

    model_config = ConfigDict(extra="allow")

    meta: LemonSqueezyMeta
    data: dict[str, Any] = {}
