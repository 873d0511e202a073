"""
Pydantic models for DocRouter webhook payloads, prompt requests and node output.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROMPT_MODEL = "gpt-4o-mini"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class WebhookEvent(BaseModel):
    """Webhook delivery from DocRouter (document.uploaded, llm.completed, ...)"""

    model_config = ConfigDict(extra="allow", frozen=True)

    # Any JSON value; signed by its text form
    timestamp: Any = None


class PromptListParams(BaseModel):
    """Query parameters for listing prompts"""

    model_config = ConfigDict(str_strip_whitespace=True)

    limit: int = Field(default=10, ge=1, le=100)
    skip: int = Field(default=0, ge=0)
    document_id: Optional[str] = None
    tag_ids: Optional[str] = None
    name_search: Optional[str] = None

    @field_validator("document_id", "tag_ids", "name_search", mode="before")
    @classmethod
    def _optional_filters(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def to_query(self) -> dict[str, Any]:
        """Query string parameters; blank filters are left out"""
        return self.model_dump(exclude_none=True)


class PromptConfig(BaseModel):
    """Prompt definition sent when creating or updating a prompt"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
    model: str = DEFAULT_PROMPT_MODEL
    schema_id: Optional[str] = None
    schema_version: Optional[int] = None
    tag_ids: Optional[list[str]] = None
    kb_id: Optional[str] = None

    @field_validator("schema_id", "kb_id", "schema_version", mode="before")
    @classmethod
    def _optional_fields(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("model", mode="before")
    @classmethod
    def _default_model(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_PROMPT_MODEL
        return value

    @field_validator("tag_ids", mode="before")
    @classmethod
    def _split_tag_ids(cls, value: Any) -> Any:
        """Accept "a, b,c" as well as a list; empty ids are dropped"""
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        tag_ids = [str(tag_id).strip() for tag_id in value if str(tag_id).strip()]
        return tag_ids or None

    def to_body(self) -> dict[str, Any]:
        """Request body; optional fields that are not set are left out"""
        return self.model_dump(exclude_none=True)


class NodeItem(BaseModel):
    """One output record of a node execution"""

    json_: dict[str, Any] | list[Any] = Field(alias="json")
    paired_item: int
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
