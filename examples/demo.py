"""
Demo script for the Agora trust core.

Walks through:
- Content filtering of a few evasive inputs
- Visibility-level presentation of an anonymous author
- A mutual identity reveal and its effect on post rendering
"""

import asyncio

from agora.identity import (
    IdentityDisclosureEngine,
    InMemoryConversationStore,
    InMemoryUserDirectory,
    UserIdentity,
    VisibilityLevel,
)
from agora.safety import get_content_filter


async def run_demo():
    """Run a demonstration of the trust core."""
    print("\n" + "=" * 70)
    print("AGORA DEMO - content safety and identity disclosure")
    print("=" * 70)

    content_filter = get_content_filter()
    print("\nDemo 1: Content filter")
    for text in ["hello world", "sh1t", "s.h.i.t", "shiiiiit", "k y s", "classic"]:
        result = content_filter.detect(text)
        verdict = "blocked" if result.blocked else "allowed"
        print(f"   {text!r:14} -> {verdict} {result.sorted_matches() or ''}")

    users = InMemoryUserDirectory(
        [
            UserIdentity(
                user_id="user-a",
                alias="QuietOtter",
                real_name="Ada Byron",
                visibility_level=VisibilityLevel.ANONYMOUS,
                fields_of_interest=["Software Engineering"],
                school="State University",
                graduation_year=2026,
            ),
            UserIdentity(
                user_id="user-b",
                alias="BrightFalcon",
                real_name="Sam Rivera",
                visibility_level=VisibilityLevel.ROLE,
                fields_of_interest=["Product Management"],
            ),
            UserIdentity(user_id="user-c", alias="CalmHeron"),
        ]
    )
    engine = IdentityDisclosureEngine(InMemoryConversationStore(), users)
    author = await users.get("user-a")

    print("\nDemo 2: How user-a's post author block looks before any reveal")
    for viewer in ["user-b", "user-c"]:
        context = await engine.viewer_context(viewer)
        print(f"   viewer {viewer}: {context.author_block(author)}")

    print("\nDemo 3: user-a asks user-b to reveal, user-b accepts")
    conversation, _ = await engine.create_conversation("user-a", "user-b")
    view = await engine.request_reveal(conversation.id, "user-a")
    print(f"   after request (as user-b): {(await engine.get_disclosure_view(conversation.id, 'user-b')).to_dict()}")
    view = await engine.respond_reveal(conversation.id, "user-b", accept=True)
    print(f"   after accept: {view.to_dict()}")

    print("\nDemo 4: The same post, rendered again")
    for viewer in ["user-b", "user-c"]:
        context = await engine.viewer_context(viewer)
        print(f"   viewer {viewer}: {context.author_block(author)}")

    print("\nTranscript as seen by user-a:")
    for entry in await engine.transcript(conversation.id, "user-a"):
        print(f"   [{entry.message.kind.value}] {entry.sender_alias}: {entry.message.content}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    asyncio.run(run_demo())
