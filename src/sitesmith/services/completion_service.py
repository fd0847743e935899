import logging
from typing import Dict, List, Optional, Sequence

from src.providers.base import CompletionProvider
from src.sitesmith.models.exceptions import EmptyResponseError
from src.sitesmith.models.project import Message
from src.sitesmith.prompts.prompt_manager import (
    ENHANCE_PROMPT_TEMPLATE,
    GENERATE_WEBSITE_TEMPLATE,
    PromptManager,
)
from src.sitesmith.services.user_settings_manager import update_api_key

logger = logging.getLogger(__name__)


class CompletionService:
    """
    Turns project conversations into completion requests.

    Responsibilities:
    - Prefix each request with the right system instruction.
    - Map chat history role-for-role onto the provider's message format.
    - Offer website generation and prompt enhancement as blocking calls.
    """

    def __init__(self, provider: CompletionProvider, prompt_manager: Optional[PromptManager] = None):
        self.provider = provider
        self.prompt_manager = prompt_manager or PromptManager()
        self._generation_instruction = self.prompt_manager.render(GENERATE_WEBSITE_TEMPLATE)
        self._enhancement_instruction = self.prompt_manager.render(ENHANCE_PROMPT_TEMPLATE)

    def build_generation_messages(self, chat_history: Sequence[Message]) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": self._generation_instruction}]
        messages.extend({"role": message.role, "content": message.content} for message in chat_history)
        return messages

    def generate(self, chat_history: Sequence[Message]) -> str:
        """
        Generate the next version of the website for a conversation.

        Args:
            chat_history: The project's history, ending with the newest user message.

        Returns:
            The raw text returned by the provider; callers sanitize it.

        Raises:
            CompletionError: Any classified failure from the provider.
        """
        messages = self.build_generation_messages(chat_history)
        logger.info("Requesting website generation (%d history message(s))", len(chat_history))
        return self.provider.complete(messages)

    def enhance(self, user_prompt: str) -> str:
        """
        Expand a terse website request into a detailed brief.

        Raises:
            ValueError: If the prompt is blank.
            CompletionError: Any classified failure from the provider.
        """
        prompt = (user_prompt or "").strip()
        if not prompt:
            raise ValueError("A prompt is required for enhancement.")

        messages = [
            {"role": "system", "content": self._enhancement_instruction},
            {"role": "user", "content": prompt},
        ]
        logger.info("Requesting prompt enhancement")
        enhanced = self.provider.complete(messages).strip()
        if not enhanced:
            raise EmptyResponseError("Received an empty response from the AI for prompt enhancement.")
        return enhanced

    def update_api_key(self, api_key: str) -> None:
        """
        Use a new API key from now on and save it to user_settings.json.

        The provider is updated first, so a blank key is rejected before
        anything is written.

        Raises:
            ValueError: If the key is blank.
        """
        self.provider.set_api_key(api_key)
        update_api_key(api_key)
        logger.info("API key replaced for %s", self.provider.provider_name)
