"""
Regex fallback extraction from call summaries and transcripts.

Used only for fields the structured shapes left empty.
"""

import re

# Local part must start at a token boundary, keeping the scan linear on long runs.
EMAIL_RE = re.compile(r"(?<![A-Za-z0-9._%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}")

# 10-15 digits, separators between digits, never directly after "$" or a word char.
PHONE_RE = re.compile(r"(?<![\w$.,])\+?\(?\d(?:[\s().-]{0,2}\d){9,14}(?![\s().-]?\d)")

NAME_TRIGGERS = (
    re.compile(r"\bmy name is\s+(.{1,40})", re.IGNORECASE),
    re.compile(r"\bthis is\s+(.{1,40})", re.IGNORECASE),
)

ROLE_WORDS = {
    "owner", "buyer", "lender", "investor", "broker", "seller", "agent", "landlord",
    "realtor", "developer",
}

STOP_WORDS = {
    "a", "an", "the", "and", "or", "from", "with", "at", "of", "calling", "here",
    "i", "i'm", "im", "is", "was", "about", "for", "to", "on", "in", "my", "speaking",
    "looking", "interested", "just", "not", "it", "that",
}


def find_email(text: str) -> str:
    if not text:
        return ""
    match = EMAIL_RE.search(text)
    return match.group(0).rstrip(".") if match else ""


def find_phone(text: str) -> str:
    """First phone-shaped token with 10-15 digits, as written."""
    if not text:
        return ""
    for match in PHONE_RE.finditer(text):
        token = match.group(0).strip()
        digits = re.sub(r"\D", "", token)
        if 10 <= len(digits) <= 15:
            return token
    return ""


def find_name(text: str) -> str:
    """
    Name following "my name is" / "this is".

    Role words are dropped, the name stops at the first connector word and
    keeps at most three words, title-cased. Returns "" when the phrase is not
    followed by something name-like ("this is a great property").
    """
    if not text:
        return ""
    for trigger in NAME_TRIGGERS:
        for match in trigger.finditer(text):
            name = _clean_name(match.group(1))
            if name:
                return name
    return ""


def _clean_name(captured: str) -> str:
    captured = re.split(r"[.,;:!?\n]", captured, maxsplit=1)[0]
    words: list[str] = []
    for token in re.findall(r"[A-Za-z][A-Za-z'-]*", captured):
        lowered = token.lower()
        if lowered in ROLE_WORDS:
            continue
        if lowered in STOP_WORDS:
            break
        words.append(token)
        if len(words) == 3:
            break
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)
