"""
Identity presentation rules.

`present` is the single place that decides which identity fields a viewer
may see. It is pure and total: one output per (identity, viewer_is_owner,
force_reveal), no I/O.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from agora.identity.models import DisclosurePresentation, UserIdentity, VisibilityLevel


def _public_presentation(identity: UserIdentity) -> DisclosurePresentation:
    level = VisibilityLevel.parse(identity.visibility_level)
    role = identity.role

    if level is VisibilityLevel.REAL_NAME:
        return DisclosurePresentation(
            # Alias always stays primary; the real name is extra context
            display_name=identity.alias,
            real_name=identity.trimmed_real_name,
            visibility_level=level,
            role=role,
            school=identity.school,
            graduation_year=identity.graduation_year,
            is_anonymous=False,
        )

    if level is VisibilityLevel.SCHOOL:
        return DisclosurePresentation(
            display_name=identity.alias,
            visibility_level=level,
            role=role,
            school=identity.school,
            graduation_year=identity.graduation_year,
            is_anonymous=True,
        )

    if level is VisibilityLevel.ROLE:
        return DisclosurePresentation(
            display_name=identity.alias,
            visibility_level=level,
            role=role,
            is_anonymous=True,
        )

    return DisclosurePresentation(
        display_name=identity.alias,
        visibility_level=VisibilityLevel.ANONYMOUS,
        is_anonymous=True,
    )


def present(
    identity: UserIdentity,
    viewer_is_owner: bool = False,
    force_reveal: bool = False,
) -> DisclosurePresentation:
    """
    Compute what may be shown of `identity` to one viewer.

    Args:
        identity: The author/profile being rendered
        viewer_is_owner: The viewer is this user
        force_reveal: The viewer and this user share a mutually revealed
            conversation

    Returns:
        The presentation. The alias is always the display name; owner and
        force-reveal only add the real name and clear `is_anonymous`.
    """
    presentation = _public_presentation(identity)
    if viewer_is_owner or force_reveal:
        return replace(
            presentation,
            real_name=identity.trimmed_real_name,
            is_anonymous=False,
        )
    return presentation


def sender_label(identity: UserIdentity | None, is_revealed: bool, fallback: str = "Anonymous") -> str:
    """Sender label inside a conversation transcript."""
    if identity is None:
        return fallback
    if is_revealed:
        return identity.trimmed_real_name or identity.alias
    return identity.alias


def participant_block(
    user_id: str,
    identity: UserIdentity | None,
    is_revealed: bool,
) -> dict[str, Any]:
    """Participant entry of a conversation summary."""
    if identity is None:
        return {
            "userId": user_id,
            "alias": "Anonymous",
            "isAnonymous": True,
            "isIdentityRevealed": False,
            "role": None,
            "school": None,
            "graduationYear": None,
        }

    visible = _public_presentation(identity)
    return {
        "userId": user_id,
        "alias": sender_label(identity, is_revealed),
        "isAnonymous": not is_revealed,
        "isIdentityRevealed": is_revealed,
        "role": visible.role if is_revealed else None,
        "school": visible.school if is_revealed else None,
        "graduationYear": visible.graduation_year if is_revealed else None,
    }
