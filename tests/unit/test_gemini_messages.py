"""Tests for mapping chat messages onto Gemini contents."""

from support_router.generation.gemini_provider import split_system


def test_system_messages_become_system_instruction():
    system, contents = split_system(
        [
            {"role": "system", "content": "persona"},
            {"role": "system", "content": "policies"},
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]
    )
    assert system == "persona\n\npolicies"
    assert [c.role for c in contents] == ["user", "model"]
    assert contents[1].parts[0].text == "hello"


def test_no_system_messages():
    system, contents = split_system([{"role": "user", "content": "hi"}])
    assert system is None
    assert len(contents) == 1
