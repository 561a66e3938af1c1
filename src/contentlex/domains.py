"""Content domains: fixed partitions of the keyed document space.

Each domain names one document per locale and declares the shape of its
values. Domains are defined once at import time; there is no runtime
registration.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from contentlex.enums import DocumentShape

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "ContentDomain",
    "ALL_DOMAINS",
    "get_domain",
    # Cards
    "CARD_NAME",
    "CARD_UPRIGHT_MEANING",
    "CARD_REVERSED_MEANING",
    "CARD_DESCRIPTION",
    "CARD_KEYWORDS",
    # Dynamic content
    "JOURNAL_PROMPT",
    "TOPIC_NAME",
    "TOPIC_DESCRIPTION",
    "SPREAD_NAME",
    "SPREAD_DESCRIPTION",
    "SUIT_NAME",
    "SUIT_DESCRIPTION",
    # Guides
    "GUIDE_PROFILE",
    "GUIDE_TEMPLATE",
]


@dataclass(frozen=True, slots=True)
class ContentDomain:
    """A named content partition with a fixed value shape.

    Attributes:
        name: Domain name; also the document file stem ('card-name.json')
        shape: Shape every value in the domain's documents must have
    """

    name: str
    shape: DocumentShape

    def __str__(self) -> str:
        return self.name

    @property
    def is_list(self) -> bool:
        """True for key -> list-of-string domains."""
        return self.shape is DocumentShape.STRING_LIST


CARD_NAME = ContentDomain("card-name", DocumentShape.STRING)
CARD_UPRIGHT_MEANING = ContentDomain("card-upright-meaning", DocumentShape.STRING)
CARD_REVERSED_MEANING = ContentDomain("card-reversed-meaning", DocumentShape.STRING)
CARD_DESCRIPTION = ContentDomain("card-description", DocumentShape.STRING)
CARD_KEYWORDS = ContentDomain("card-keywords", DocumentShape.STRING_LIST)

JOURNAL_PROMPT = ContentDomain("journal-prompt", DocumentShape.STRING_LIST)
TOPIC_NAME = ContentDomain("topic-name", DocumentShape.STRING)
TOPIC_DESCRIPTION = ContentDomain("topic-description", DocumentShape.STRING)
SPREAD_NAME = ContentDomain("spread-name", DocumentShape.STRING)
SPREAD_DESCRIPTION = ContentDomain("spread-description", DocumentShape.STRING)
SUIT_NAME = ContentDomain("suit-name", DocumentShape.STRING)
SUIT_DESCRIPTION = ContentDomain("suit-description", DocumentShape.STRING)

# Guide name/title/description/expertise, keyed "{persona}.{field}"
GUIDE_PROFILE = ContentDomain("guide-profile", DocumentShape.STRING)
# Interpretation phrase variants, keyed "{persona}.{topic}.{slot}"
GUIDE_TEMPLATE = ContentDomain("guide-template", DocumentShape.STRING_LIST)

ALL_DOMAINS: tuple[ContentDomain, ...] = (
    CARD_NAME,
    CARD_UPRIGHT_MEANING,
    CARD_REVERSED_MEANING,
    CARD_DESCRIPTION,
    CARD_KEYWORDS,
    JOURNAL_PROMPT,
    TOPIC_NAME,
    TOPIC_DESCRIPTION,
    SPREAD_NAME,
    SPREAD_DESCRIPTION,
    SUIT_NAME,
    SUIT_DESCRIPTION,
    GUIDE_PROFILE,
    GUIDE_TEMPLATE,
)

_DOMAINS_BY_NAME: dict[str, ContentDomain] = {domain.name: domain for domain in ALL_DOMAINS}


def get_domain(domain: ContentDomain | str) -> ContentDomain:
    """Look up a domain by name (ContentDomain instances pass through).

    Raises:
        ValueError: If no domain has that name
    """
    if isinstance(domain, ContentDomain):
        return domain
    try:
        return _DOMAINS_BY_NAME[domain]
    except KeyError:
        msg = f"Unknown content domain '{domain}'"
        raise ValueError(msg) from None
