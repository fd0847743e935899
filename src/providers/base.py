from abc import ABC, abstractmethod
from typing import Dict, List


class CompletionProvider(ABC):
    """
    Abstract Base Class for chat-completion providers.
    This defines the contract that all concrete provider implementations must follow.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """The official name of the provider (e.g., 'OpenRouter')."""
        pass

    @abstractmethod
    def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Sends a structured conversation and returns the generated text.

        Args:
            messages: List of message dictionaries with 'role' and 'content' keys,
                where role is one of 'system', 'user' or 'assistant'.

        Returns:
            The raw text of the first completion choice.

        Raises:
            AuthError: The API key is missing or was rejected.
            RequestError: The endpoint answered with any other error status.
            EmptyResponseError: The endpoint answered without usable content.
            TransportError: The request never completed.
        """
        pass

    def set_api_key(self, api_key: str) -> None:
        """Replace the credential used by later requests."""
        raise NotImplementedError(f"{self.provider_name} does not use an API key.")
