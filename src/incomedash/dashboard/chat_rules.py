"""Keyword rule engine for the "Data Guide" chat panel.

An ordered table of (predicate over normalized input, response) pairs,
evaluated first-match-wins, with a fixed fallback. Independent of the
aggregation pipeline; the answers are static text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Sequence

GREETING = (
    "Hello! I'm your data guide. Ask me about the charts or for a key insight. "
    "Type 'help' to see what I can answer."
)

FALLBACK = (
    "I'm sorry, I'm not sure how to answer that. You can ask me to explain a specific chart "
    "or give you a key insight. Type 'help' for examples."
)

_TOKEN_RE = re.compile(r"[a-z0-9']+")


@dataclass(frozen=True)
class NormalizedInput:
    """Lower-cased, trimmed user text plus its word tokens."""
    text: str
    words: frozenset[str]

    @classmethod
    def from_text(cls, raw: str) -> "NormalizedInput":
        text = raw.lower().strip()
        return cls(text=text, words=frozenset(_TOKEN_RE.findall(text)))


Predicate = Callable[[NormalizedInput], bool]


def any_word(*words: str) -> Predicate:
    """Match when any of words appears as a whole word."""
    wanted = frozenset(w.lower() for w in words)
    return lambda inp: bool(inp.words & wanted)


def any_substring(*fragments: str) -> Predicate:
    """Match when any fragment appears anywhere in the text."""
    wanted = tuple(f.lower() for f in fragments)
    return lambda inp: any(f in inp.text for f in wanted)


@dataclass(frozen=True)
class ChatRule:
    name: str
    predicate: Predicate
    response: str


DEFAULT_RULES: tuple[ChatRule, ...] = (
    ChatRule(
        "greeting",
        any_word("hello", "hi"),
        "Hi there! How can I help you understand this data?",
    ),
    ChatRule(
        "help",
        any_substring("help"),
        "You can ask me things like: 'Explain the age chart', 'What does the education chart show?', "
        "'Tell me about the occupation data', or 'Give me a key takeaway'.",
    ),
    ChatRule(
        "age",
        any_substring("age"),
        "The 'Income Distribution by Age' chart is a box plot. It shows that the median age for "
        "individuals earning >$50K is higher than for those earning <=$50K. The box represents the "
        "middle 50% of people in each group.",
    ),
    ChatRule(
        "education",
        any_substring("education"),
        "The 'High Income Rate by Education Level' bar chart shows the percentage of people at each "
        "education level who earn >$50K. There is a strong trend: more education is highly correlated "
        "with a higher income rate.",
    ),
    ChatRule(
        "hours",
        any_substring("hours"),
        "The 'Income Distribution by Hours Per Week' chart shows that while both groups have a median "
        "of 40 hours/week, the range for high-income earners is wider, suggesting many work more than "
        "40 hours.",
    ),
    ChatRule(
        "occupation",
        any_substring("occupation"),
        "The 'High Income Rate by Occupation' chart ranks jobs by the percentage of workers earning "
        ">$50K. 'Exec-managerial' and 'Prof-specialty' roles have the highest rates of high-income "
        "earners.",
    ),
    ChatRule(
        "takeaway",
        any_substring("takeaway", "insight", "summary"),
        "A key insight is that factors like higher education (Bachelors, Masters, Doctorate) and "
        "occupation type (managerial or professional specialty) are much stronger predictors of "
        "earning over $50K than age or hours worked alone.",
    ),
)


class DataGuide:
    """Answers free text by the first rule whose predicate matches."""

    def __init__(self, rules: Sequence[ChatRule] = DEFAULT_RULES, fallback: str = FALLBACK) -> None:
        self.rules = tuple(rules)
        self.fallback = fallback

    def match(self, user_input: str) -> ChatRule | None:
        inp = NormalizedInput.from_text(user_input)
        for rule in self.rules:
            if rule.predicate(inp):
                return rule
        return None

    def respond(self, user_input: str) -> str:
        rule = self.match(user_input)
        return rule.response if rule is not None else self.fallback


@dataclass(frozen=True)
class ChatMessage:
    sender: str  # "bot" or "user"
    text: str


@dataclass
class ChatSession:
    """Transcript of one chat panel, opened with the greeting."""
    guide: DataGuide = field(default_factory=DataGuide)
    messages: list[ChatMessage] = field(default_factory=lambda: [ChatMessage("bot", GREETING)])

    def send(self, user_input: str) -> ChatMessage | None:
        """Append the user message and the bot reply; blank input is ignored.

        Returns:
            The bot reply, or None when the input was blank.
        """
        if not user_input.strip():
            return None
        self.messages.append(ChatMessage("user", user_input))
        reply = ChatMessage("bot", self.guide.respond(user_input))
        self.messages.append(reply)
        return reply
