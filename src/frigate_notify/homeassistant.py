"""
Home Assistant REST client.

Thin wrapper over the two endpoints the host needs:
- GET  /api/states/<entity_id>         (read the silence table)
- POST /api/services/<domain>/<service> (send notifications, write the table)

Failures are logged and reported through return values; the pipeline does
not retry deliveries.
"""

import logging
from typing import Any

import requests

from .utils.constants import DEFAULT_HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class HomeAssistantClient:
    """
    Client for the Home Assistant REST API.

    Config options:
        url: Base URL (e.g. http://homeassistant.local:8123)
        token: Long-lived access token
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self._url = url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers["Content-Type"] = "application/json"
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"HomeAssistantClient initialized: {self._url}")

    @property
    def url(self) -> str:
        return self._url

    def get_state(self, entity_id: str) -> str | None:
        """
        Read an entity's state.

        Args:
            entity_id: Entity to read (e.g. input_text.frigate_silence)

        Returns:
            The state string, or None if the request failed
        """
        try:
            response = self._session.get(
                f"{self._url}/api/states/{entity_id}", timeout=self._timeout
            )
            if not response.ok:
                logger.warning(
                    f"State read for {entity_id} failed: {response.status_code} {response.text[:100]}"
                )
                return None
            return response.json().get("state")

        except requests.RequestException as e:
            logger.error(f"State read error for {entity_id}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON in state for {entity_id}: {e}")
            return None

    def call_service(self, action: str, data: dict[str, Any]) -> bool:
        """
        Call a service.

        Args:
            action: "<domain>.<service>", e.g. notify.mobile_app_phone
            data: Service data

        Returns:
            True if Home Assistant accepted the call
        """
        domain, _, service = action.partition(".")
        if not domain or not service:
            logger.warning(f"Invalid service action: {action!r}")
            return False

        try:
            response = self._session.post(
                f"{self._url}/api/services/{domain}/{service}",
                json=data,
                timeout=self._timeout,
            )
            if not response.ok:
                logger.warning(
                    f"Service {action} failed: {response.status_code} {response.text[:100]}"
                )
                return False

            logger.debug(f"Service {action} called")
            return True

        except requests.RequestException as e:
            logger.error(f"Service {action} error: {e}")
            return False
