"""OpenRouter chat-completion provider for Sitesmith."""
import logging
from typing import Any, Dict, List, Optional

import requests

from src.sitesmith.config import API_KEY_ENV_VAR, COMPLETION_CONFIG
from src.sitesmith.models.exceptions import (
    AuthError,
    EmptyResponseError,
    RequestError,
    TransportError,
)
from src.providers.base import CompletionProvider

logger = logging.getLogger(__name__)


class OpenRouterProvider(CompletionProvider):
    """
    Provider for the OpenRouter chat-completion endpoint.

    Every call is a single blocking POST. Nothing is retried; each failure is
    raised as one of the completion exceptions.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            api_key: OpenRouter API key; requests fail with AuthError while it is unset.
            model: Model identifier, defaults to COMPLETION_CONFIG['model'].
            endpoint: Chat-completion URL, defaults to COMPLETION_CONFIG['endpoint'].
            timeout: Transport timeout in seconds.
            session: Optional requests session, mainly for tests.
        """
        self.api_key = (api_key or "").strip() or None
        self.model = model or COMPLETION_CONFIG["model"]
        self.endpoint = endpoint or COMPLETION_CONFIG["endpoint"]
        self.timeout = timeout or COMPLETION_CONFIG["request_timeout_seconds"]
        self.session = session or requests.Session()

        if self.api_key:
            logger.info("OpenRouterProvider initialized for model %s", self.model)
        else:
            logger.warning(
                "OpenRouterProvider initialized without API key. "
                "Set the %s environment variable or configure api_keys.openrouter in user_settings.json",
                API_KEY_ENV_VAR,
            )

    @property
    def provider_name(self) -> str:
        return "OpenRouter"

    def set_api_key(self, api_key: str) -> None:
        key = (api_key or "").strip()
        if not key:
            raise ValueError("An OpenRouter API key cannot be blank.")
        self.api_key = key
        logger.info("OpenRouter API key updated for this session")

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": COMPLETION_CONFIG["referer"],
            "X-Title": COMPLETION_CONFIG["title"],
        }

    def complete(self, messages: List[Dict[str, str]]) -> str:
        if not self.api_key:
            raise AuthError(
                f"No OpenRouter API key is configured. Set the {API_KEY_ENV_VAR} environment variable "
                "or add api_keys.openrouter to user_settings.json."
            )

        payload = {"model": self.model, "messages": messages}
        logger.debug("Sending %d message(s) to %s using %s", len(messages), self.endpoint, self.model)

        try:
            response = self.session.post(
                self.endpoint,
                headers=self._build_headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Request to OpenRouter failed: %s", exc, exc_info=True)
            raise TransportError(
                "Failed to communicate with the AI. Please check your network connection and try again.",
                cause=exc,
            ) from exc

        if not response.ok:
            self._raise_for_status(response)

        data = self._parse_json(response)
        content = self._extract_content(data)
        if not content or not content.strip():
            logger.error("OpenRouter returned status %s without any content", response.status_code)
            raise EmptyResponseError(
                "Received an empty response from the AI.",
                status_code=response.status_code,
            )
        return content

    def _raise_for_status(self, response: requests.Response) -> None:
        status = response.status_code
        error_data = self._parse_json(response)
        if status == 401:
            logger.error("OpenRouter rejected the API key (401)")
            raise AuthError(
                "The OpenRouter API key is invalid or has expired.",
                status_code=status,
            )

        remote_message = None
        error_block = error_data.get("error")
        if isinstance(error_block, dict):
            remote_message = error_block.get("message")
        message = remote_message if isinstance(remote_message, str) and remote_message.strip() else None
        message = message or f"API request failed with status {status}"
        logger.error("OpenRouter request failed with status %s: %s", status, message)
        raise RequestError(message, status_code=status)

    @staticmethod
    def _parse_json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            logger.debug("OpenRouter response body is not JSON")
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _extract_content(data: Dict[str, Any]) -> Optional[str]:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        if not isinstance(first, dict):
            return None
        message = first.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        return content if isinstance(content, str) else None
