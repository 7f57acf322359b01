"""
Tests for identity presentation rules.
"""

import pytest

from agora.identity import UserIdentity, ViewerContext, VisibilityLevel, present
from agora.identity.presentation import participant_block, sender_label


def make_identity(level, **overrides):
    data = {
        "user_id": "user-a",
        "alias": "QuietOtter",
        "real_name": "Ada Byron",
        "visibility_level": level,
        "fields_of_interest": ["Software Engineering", "Design"],
        "school": "State University",
        "graduation_year": 2026,
    }
    data.update(overrides)
    return UserIdentity(**data)


class TestVisibilityLevels:
    """One test per public visibility branch."""

    def test_anonymous_shows_alias_only(self):
        result = present(make_identity(VisibilityLevel.ANONYMOUS))
        assert result.display_name == "QuietOtter"
        assert result.is_anonymous
        assert result.visibility_level == VisibilityLevel.ANONYMOUS
        assert result.real_name is None
        assert result.role is None
        assert result.school is None
        assert result.graduation_year is None

    def test_role_adds_first_interest(self):
        result = present(make_identity(VisibilityLevel.ROLE))
        assert result.is_anonymous
        assert result.role == "Software Engineering"
        assert result.school is None
        assert result.graduation_year is None
        assert result.real_name is None

    def test_role_without_interests(self):
        result = present(make_identity(VisibilityLevel.ROLE, fields_of_interest=[]))
        assert result.role is None

    def test_school_adds_school_and_year(self):
        result = present(make_identity(VisibilityLevel.SCHOOL))
        assert result.is_anonymous
        assert result.role == "Software Engineering"
        assert result.school == "State University"
        assert result.graduation_year == 2026
        assert result.real_name is None

    def test_real_name_keeps_alias_as_display_name(self):
        result = present(make_identity(VisibilityLevel.REAL_NAME))
        assert result.display_name == "QuietOtter"
        assert result.real_name == "Ada Byron"
        assert not result.is_anonymous

    def test_real_name_is_trimmed(self):
        result = present(make_identity(VisibilityLevel.REAL_NAME, real_name="  Ada Byron "))
        assert result.real_name == "Ada Byron"

    def test_blank_real_name_is_absent(self):
        result = present(make_identity(VisibilityLevel.REAL_NAME, real_name="   "))
        assert result.real_name is None
        assert result.display_name == "QuietOtter"
        assert not result.is_anonymous


class TestUnknownVisibility:
    """Unrecognized stored values degrade to anonymous."""

    def test_parse_unknown_value(self):
        assert VisibilityLevel.parse("public") == VisibilityLevel.ANONYMOUS
        assert VisibilityLevel.parse(None) == VisibilityLevel.ANONYMOUS
        assert VisibilityLevel.parse("realName") == VisibilityLevel.REAL_NAME

    def test_identity_normalizes_unknown_value(self):
        result = present(make_identity("everyone"))
        assert result.visibility_level == VisibilityLevel.ANONYMOUS
        assert result.is_anonymous
        assert result.real_name is None


class TestElevatedViewers:
    """Owner and mutual-reveal peers see the real name."""

    @pytest.mark.parametrize(
        "flags",
        [{"viewer_is_owner": True}, {"force_reveal": True}],
    )
    def test_real_name_added_for_anonymous_author(self, flags):
        result = present(make_identity(VisibilityLevel.ANONYMOUS), **flags)
        assert result.display_name == "QuietOtter"
        assert result.real_name == "Ada Byron"
        assert not result.is_anonymous
        assert result.visibility_level == VisibilityLevel.ANONYMOUS

    def test_elevation_keeps_visibility_branch_fields(self):
        result = present(make_identity(VisibilityLevel.ROLE), force_reveal=True)
        assert result.role == "Software Engineering"
        assert result.school is None

    def test_elevation_without_real_name(self):
        result = present(
            make_identity(VisibilityLevel.ANONYMOUS, real_name=None), viewer_is_owner=True
        )
        assert result.real_name is None
        assert not result.is_anonymous


class TestPresentationProperties:
    """Properties that hold across all inputs."""

    @pytest.mark.parametrize("level", list(VisibilityLevel))
    def test_deterministic(self, level):
        identity = make_identity(level)
        assert present(identity) == present(identity)

    @pytest.mark.parametrize(
        "level",
        [VisibilityLevel.ANONYMOUS, VisibilityLevel.ROLE, VisibilityLevel.SCHOOL],
    )
    def test_real_name_never_leaks_publicly(self, level):
        assert present(make_identity(level)).real_name is None

    def test_to_dict_keys(self):
        data = present(make_identity(VisibilityLevel.SCHOOL)).to_dict()
        assert data == {
            "displayName": "QuietOtter",
            "realName": None,
            "visibilityLevel": "school",
            "role": "Software Engineering",
            "school": "State University",
            "graduationYear": 2026,
            "isAnonymous": True,
        }

    def test_author_block(self):
        block = present(make_identity(VisibilityLevel.REAL_NAME)).to_author_block("user-a")
        assert block["authorId"] == "user-a"
        assert block["authorAlias"] == "QuietOtter"
        assert block["authorRealName"] == "Ada Byron"
        assert block["authorVisibilityLevel"] == "realName"
        assert block["isAnonymous"] is False


class TestConversationLabels:
    """Sender labels and participant blocks inside conversations."""

    def test_sender_label(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS)
        assert sender_label(identity, is_revealed=False) == "QuietOtter"
        assert sender_label(identity, is_revealed=True) == "Ada Byron"
        assert sender_label(None, is_revealed=True) == "Anonymous"

    def test_sender_label_revealed_without_real_name(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS, real_name=None)
        assert sender_label(identity, is_revealed=True) == "QuietOtter"

    def test_participant_block_hidden_until_revealed(self):
        identity = make_identity(VisibilityLevel.SCHOOL)
        hidden = participant_block("user-a", identity, is_revealed=False)
        assert hidden["alias"] == "QuietOtter"
        assert hidden["isAnonymous"] is True
        assert hidden["school"] is None

        shown = participant_block("user-a", identity, is_revealed=True)
        assert shown["alias"] == "Ada Byron"
        assert shown["isIdentityRevealed"] is True
        assert shown["school"] == "State University"

    def test_participant_block_unknown_user(self):
        block = participant_block("ghost", None, is_revealed=True)
        assert block["alias"] == "Anonymous"
        assert block["isIdentityRevealed"] is False


class TestViewerContext:
    """Per-request rendering context."""

    def test_signed_out_viewer_sees_public_presentation(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS)
        assert ViewerContext.anonymous().present(identity) == present(identity)

    def test_owner_sees_own_real_name(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS)
        result = ViewerContext(viewer_id="user-a").present(identity)
        assert result.real_name == "Ada Byron"

    def test_revealed_peer_sees_real_name(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS)
        context = ViewerContext(viewer_id="user-b", revealed_peers=frozenset({"user-a"}))
        assert context.present(identity).real_name == "Ada Byron"

    def test_other_viewer_sees_alias_only(self):
        identity = make_identity(VisibilityLevel.ANONYMOUS)
        context = ViewerContext(viewer_id="user-c", revealed_peers=frozenset({"user-b"}))
        result = context.present(identity)
        assert result.real_name is None
        assert result.is_anonymous

    def test_author_blocks(self):
        first = make_identity(VisibilityLevel.ANONYMOUS)
        second = make_identity(VisibilityLevel.ROLE, user_id="user-d", alias="BrightFalcon")
        context = ViewerContext(viewer_id="user-b", revealed_peers=frozenset({"user-a"}))
        blocks = context.author_blocks([first, second])
        assert [b["authorId"] for b in blocks] == ["user-a", "user-d"]
        assert blocks[0]["isAnonymous"] is False
        assert blocks[1]["isAnonymous"] is True
