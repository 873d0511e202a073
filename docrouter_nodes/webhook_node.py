"""
DocRouter Webhook trigger node: verifies a delivery and relays it into the workflow.
"""

from typing import Any, Mapping

from docrouter_nodes import logging
from docrouter_nodes.models import WebhookEvent
from docrouter_nodes.security import SIGNATURE_HEADER, verify_webhook_signature

logger = logging.getLogger(__name__)


def _get_header(headers: Mapping[str, Any], name: str) -> Any:
    """Case-insensitive header lookup"""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


class DocRouterWebhookNode:
    """Trigger node receiving DocRouter webhook events"""

    def __init__(
        self,
        path: str = "docrouter",
        verify_signature: bool = True,
        webhook_secret: str | None = "",
    ):
        self.path = path.strip("/")
        self.verify_signature = verify_signature
        self.webhook_secret = webhook_secret.strip() if isinstance(webhook_secret, str) else ""

    def handle(
        self,
        raw_body: bytes,
        body: dict[str, Any],
        headers: Mapping[str, Any],
        query: Mapping[str, Any],
        params: Mapping[str, Any],
        now: float,
    ) -> list[dict[str, Any]]:
        """
        Verify an inbound delivery and build the workflow output.

        Args:
            raw_body: Request body exactly as received
            body: Parsed JSON body
            headers: Request headers
            query: Query string parameters
            params: Path parameters
            now: Current Unix time in seconds

        Returns:
            A single record: the payload plus a "webhook_meta" entry

        Raises:
            WebhookVerificationError: The delivery failed verification
        """
        if self.verify_signature and self.webhook_secret:
            event = WebhookEvent.model_validate(body)
            verify_webhook_signature(
                secret=self.webhook_secret,
                raw_body=raw_body,
                timestamp=event.timestamp,
                signature=_get_header(headers, SIGNATURE_HEADER),
                now=now,
            )
            logger.info("Webhook signature verified successfully")
        else:
            logger.info("Webhook signature verification disabled, accepting event")

        return [
            {
                **body,
                "webhook_meta": {
                    "headers": dict(headers),
                    "query": dict(query),
                    "params": dict(params),
                },
            }
        ]
