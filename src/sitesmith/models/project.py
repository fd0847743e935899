import logging
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "New Website"
PROJECT_NAME_MAX_LENGTH = 40
PROJECT_NAME_ELLIPSIS = "..."


def _new_project_id() -> str:
    return f"website-{uuid.uuid4().hex[:12]}"


class Message(BaseModel):
    """
    One turn in a project conversation.

    For the assistant role, ``content`` is the complete HTML document as of
    that turn rather than a natural-language reply.
    """

    role: Literal["user", "assistant"]
    content: str


class WebsiteProject(BaseModel):
    """A website in progress: its conversation plus the latest generated document."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_project_id, description="Opaque, immutable identifier")
    name: str = Field(..., description="Human-readable label shown in the project list")
    chat_history: List[Message] = Field(
        default_factory=list,
        alias="chatHistory",
        description="Append-only conversation, oldest first",
    )
    generated_code: Optional[str] = Field(
        default=None,
        alias="generatedCode",
        description="Most recent assistant-produced HTML document",
    )

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        """Ensure project names are non-empty."""
        if not value or not value.strip():
            logger.error("Attempted to create project with empty name.")
            raise ValueError("Project name must be a non-empty string.")
        return value

    @field_validator("chat_history")
    @classmethod
    def _validate_history(cls, value: List[Message]) -> List[Message]:
        """Every assistant message must answer the user message right before it."""
        for index, message in enumerate(value):
            if message.role == "assistant" and (index == 0 or value[index - 1].role != "user"):
                raise ValueError(
                    f"Assistant message at position {index} is not preceded by a user message."
                )
        return value


class StoreSnapshot(BaseModel):
    """Everything the persistence layer saves and restores for the project store."""

    projects: List[WebsiteProject] = Field(default_factory=list)
    active_project_id: Optional[str] = None


def derive_project_name(prompt: str) -> str:
    """Name a project after its first prompt, truncated with an ellipsis marker."""
    if len(prompt) > PROJECT_NAME_MAX_LENGTH:
        return prompt[:PROJECT_NAME_MAX_LENGTH] + PROJECT_NAME_ELLIPSIS
    return prompt


def new_project(name: str = DEFAULT_PROJECT_NAME) -> WebsiteProject:
    """Create an empty project with a fresh identifier."""
    return WebsiteProject(name=name)
