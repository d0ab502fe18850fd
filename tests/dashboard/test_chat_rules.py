"""Unit tests for the Data Guide chat rules."""

import pytest

from incomedash.dashboard.chat_rules import (
    DEFAULT_RULES,
    FALLBACK,
    GREETING,
    ChatMessage,
    ChatRule,
    ChatSession,
    DataGuide,
    NormalizedInput,
    any_substring,
    any_word,
)


@pytest.mark.parametrize(
    "text, rule_name",
    [
        ("hello", "greeting"),
        ("  HI  ", "greeting"),
        ("Hi, can you help me?", "greeting"),
        ("help", "help"),
        ("Explain the age chart", "age"),
        ("What does the education chart show?", "education"),
        ("Tell me about hours", "hours"),
        ("Tell me about the occupation data", "occupation"),
        ("Give me a key takeaway", "takeaway"),
        ("any insight?", "takeaway"),
        ("SUMMARY please", "takeaway"),
    ],
)
def test_default_rules_first_match(text, rule_name):
    rule = DataGuide().match(text)
    assert rule is not None
    assert rule.name == rule_name


def test_greeting_needs_whole_word():
    """'hi' inside another word (e.g. 'this') is not a greeting."""
    guide = DataGuide()
    assert guide.match("what is this chart") is None
    assert guide.respond("what is this chart") == FALLBACK


def test_unmatched_input_gets_fallback():
    assert DataGuide().respond("what's the weather?") == FALLBACK


def test_rule_order_is_preserved():
    assert [r.name for r in DEFAULT_RULES] == [
        "greeting", "help", "age", "education", "hours", "occupation", "takeaway",
    ]


def test_custom_rules():
    guide = DataGuide(
        rules=[ChatRule("ping", any_word("ping"), "pong")],
        fallback="?",
    )
    assert guide.respond("Ping!") == "pong"
    assert guide.respond("ding") == "?"


def test_normalized_input():
    inp = NormalizedInput.from_text("  Hello, World!  ")
    assert inp.text == "hello, world!"
    assert inp.words == frozenset({"hello", "world"})


def test_predicates():
    inp = NormalizedInput.from_text("percentage of earners")
    assert any_substring("age")(inp) is True
    assert any_word("age")(inp) is False


def test_chat_session_starts_with_greeting():
    session = ChatSession()
    assert session.messages == [ChatMessage("bot", GREETING)]


def test_chat_session_send_appends_user_and_bot():
    session = ChatSession()
    reply = session.send("help")
    assert reply is not None
    assert reply.sender == "bot"
    assert [m.sender for m in session.messages] == ["bot", "user", "bot"]
    assert session.messages[1].text == "help"
    assert session.messages[2] is reply


def test_chat_session_ignores_blank_input():
    session = ChatSession()
    assert session.send("   ") is None
    assert len(session.messages) == 1
