"""
Notification Service
Best-effort delivery of completed payments to the downstream webhook
"""

import threading
from typing import Any, Dict, Optional

import requests

from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)


class WebhookNotifier:
    """
    Posts transaction summaries to MAKE_WEBHOOK_URL.

    Delivery runs in a detached daemon thread unless ``eager`` is set, in
    which case it runs inline. Failures are logged and discarded either way.
    """

    def __init__(self, url: Optional[str], timeout: float = 10, eager: bool = False):
        self.url = url
        self.timeout = timeout
        self.eager = eager

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def notify(self, payload: Dict[str, Any]) -> Optional[threading.Thread]:
        """
        Schedule delivery of ``payload``.

        Returns:
            The delivery thread, or None when delivery ran inline or is disabled
        """
        if not self.enabled:
            return None

        if self.eager:
            self.deliver(payload)
            return None

        thread = threading.Thread(
            target=self.deliver,
            args=(payload,),
            name='webhook-notifier',
            daemon=True
        )
        thread.start()
        return thread

    def deliver(self, payload: Dict[str, Any]) -> bool:
        """Post ``payload`` once. Returns whether the webhook accepted it."""
        try:
            resp = requests.post(self.url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except Exception as exc:
            logger.warning(
                f'Webhook notification for {payload.get("registration_id")} failed: {exc}'
            )
            return False

        logger.info(
            f'Webhook notification sent for {payload.get("registration_id")} '
            f'(HTTP {resp.status_code})'
        )
        return True
