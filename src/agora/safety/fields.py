"""
Tagged input structs for the moderated write paths.

Each struct knows which labels its fields are checked under, so callers
never assemble ad-hoc (label, value) lists.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from agora.safety.base import LabeledText


class PostFields(BaseModel):
    """Text of a post create/update."""

    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    def labeled(self) -> list[LabeledText]:
        fields = [
            LabeledText("title", self.title.strip()),
            LabeledText("content", self.content.strip()),
        ]
        for tag in self.tags:
            tag = tag.strip()
            if tag:
                fields.append(LabeledText("tag", tag))
        return fields


class CommentFields(BaseModel):
    """Text of a comment create/update."""

    content: str

    def labeled(self) -> list[LabeledText]:
        return [LabeledText("comment", self.content.strip())]


class MessageFields(BaseModel):
    """Text of a direct message."""

    content: str

    def labeled(self) -> list[LabeledText]:
        return [LabeledText("message", self.content.strip())]
