"""Request bodies for the HTTP surface. Wire keys are camelCase."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class LabeledField(BaseModel):
    label: str
    value: str


class ModerationCheckRequest(BaseModel):
    fields: list[LabeledField] = Field(default_factory=list)


class DirectConversationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_user_id: str = Field(..., alias="targetUserId", min_length=1)


class RevealResponseRequest(BaseModel):
    # Only a JSON `true` accepts; strings and numbers are rejected
    accept: StrictBool = False


class SendMessageRequest(BaseModel):
    content: str = ""
