from loguru import logger

from zenkit.api import RequestSpec, ZenkitAPIClient, ZenkitEndpoints
from zenkit.types import NewWebhook, Webhook
from zenkit.utils import instantiate_from_payload, instantiate_many, to_wire_dict


class DatabaseWebhooks:
    def __init__(self):
        super().__init__()
        if getattr(self, '_api_client', None) is None:
            self._api_client = ZenkitAPIClient(getattr(self, 'settings', None))

    def reset(self):
        pass

    def create_webhook(self, webhook: NewWebhook) -> Webhook:
        spec = RequestSpec(endpoint=ZenkitEndpoints.CREATE_WEBHOOK, json_body=to_wire_dict(webhook, omit_none=True))
        payload = self._api_client.request_json(spec, operation_name="create webhook")
        created = instantiate_from_payload(Webhook, payload)
        logger.info(f"Created webhook {created.id}", url=created.url, trigger=created.trigger_type)
        return created

    def delete_webhook(self, webhook_id: int) -> Webhook:
        spec = RequestSpec(endpoint=ZenkitEndpoints.DELETE_WEBHOOK.format(webhook_id=webhook_id))
        payload = self._api_client.request_json(spec, operation_name=f"delete webhook {webhook_id}")
        return instantiate_from_payload(Webhook, payload)

    def get_webhooks(self) -> list[Webhook]:
        """Webhooks registered by the current user."""
        spec = RequestSpec(endpoint=ZenkitEndpoints.LIST_WEBHOOKS)
        payload = self._api_client.request_json(spec, operation_name="list webhooks")
        return instantiate_many(Webhook, payload)
