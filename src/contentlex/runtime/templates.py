"""Interpretation template composition.

A guide persona voices an interpretation as four slots, in fixed order:
opening, context, advice, closing. Each slot has several phrase variants
in the "guide-template" domain, keyed:

    {persona}.{topic}.{slot}      topic-specific variants
    {persona}.default.{slot}      persona-wide variants

The composer picks one variant per slot with an injected random.Random,
substitutes {name}-style placeholders and joins the slots:

    opening

    context [meaning] advice

    closing

Placeholder Contract:
    A placeholder with no matching parameter is left verbatim in the
    output. Leftover placeholders are recorded as
    PARAMETER_SUBSTITUTION_INCOMPLETE, never raised.

Python 3.13+.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from babel.core import UnknownLocaleError
from babel.lists import format_list

from contentlex.constants import (
    DEFAULT_LOCALE_CODE,
    FALLBACK_ADVICE_TEMPLATE,
    FALLBACK_CLOSING_PHRASE,
    FALLBACK_CONTEXT_TEMPLATE,
    FALLBACK_OPENING_PHRASE,
    PARAGRAPH_SEPARATOR,
    SENTENCE_SEPARATOR,
    TEMPLATE_DEFAULT_TOPIC,
)
from contentlex.domains import GUIDE_TEMPLATE
from contentlex.enums import ErrorKind, TemplateSlot, TemplateSource

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from contentlex.locale_utils import LocaleId
    from contentlex.runtime.resolver import FallbackResolver
    from contentlex.runtime.statistics import StatisticsMonitor

__all__ = [
    "InterpretationTemplate",
    "TemplateComposer",
    "find_placeholders",
    "format_keywords",
    "substitute",
    "template_key",
]

logger = logging.getLogger(__name__)

_PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

_BUILT_IN_PHRASES: Mapping[TemplateSlot, str] = MappingProxyType({
    TemplateSlot.OPENING: FALLBACK_OPENING_PHRASE,
    TemplateSlot.CONTEXT: FALLBACK_CONTEXT_TEMPLATE,
    TemplateSlot.ADVICE: FALLBACK_ADVICE_TEMPLATE,
    TemplateSlot.CLOSING: FALLBACK_CLOSING_PHRASE,
})


def template_key(persona: str, topic: str, slot: TemplateSlot) -> str:
    """Build a guide-template key ('sage.love.opening')."""
    return f"{persona}.{topic}.{slot}"


def find_placeholders(template: str) -> tuple[str, ...]:
    """Placeholder names in order of appearance (duplicates kept)."""
    return tuple(match.group(1) for match in _PLACEHOLDER_PATTERN.finditer(template))


def substitute(template: str, parameters: Mapping[str, object]) -> str:
    """Replace {name} placeholders with parameter values.

    Placeholders without a matching parameter are left untouched.

    Example:
        >>> substitute("Hello {name}!", {"name": "Ana"})
        'Hello Ana!'
        >>> substitute("Hello {name}!", {})
        'Hello {name}!'
    """

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in parameters:
            return str(parameters[name])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(replace, template)


def format_keywords(keywords: Sequence[str], locale: LocaleId) -> str:
    """Join keywords as a natural-language list in the given locale.

    Uses Babel CLDR list patterns ("a, b, and c" in English, "a, b y c" in
    Spanish). Locales without CLDR data use the default locale's pattern.
    """
    items = [keyword for keyword in keywords if keyword]
    try:
        return format_list(items, locale=locale.posix)
    except (UnknownLocaleError, ValueError):
        return format_list(items, locale=DEFAULT_LOCALE_CODE)


@dataclass(frozen=True, slots=True)
class InterpretationTemplate:
    """Candidate phrases for one (persona, topic, locale).

    Attributes:
        persona: Persona name
        topic: Topic name
        locale: Locale code the template was resolved for
        candidates: Slot -> non-empty tuple of phrase variants
        sources: Slot -> where the candidates came from
            ('topic', 'persona-default' or 'built-in')
    """

    persona: str
    topic: str
    locale: str
    candidates: Mapping[TemplateSlot, tuple[str, ...]]
    sources: Mapping[TemplateSlot, TemplateSource]

    def variants(self, slot: TemplateSlot) -> tuple[str, ...]:
        """Phrase variants for a slot."""
        return self.candidates[slot]

    @property
    def is_complete(self) -> bool:
        """True when no slot had to use a built-in phrase."""
        return TemplateSource.BUILT_IN not in self.sources.values()


class TemplateComposer:
    """Composes persona-voiced interpretations from template variants.

    Randomness comes from an injected random.Random so that callers and
    tests control variant selection.

    Example:
        >>> composer = TemplateComposer(resolver, monitor, rng=random.Random(7))
        >>> text = composer.compose("sage", "love", LocaleId("en"), "The Star", "upright")
    """

    __slots__ = ("_resolver", "_rng", "_statistics")

    def __init__(
        self,
        resolver: FallbackResolver,
        statistics: StatisticsMonitor,
        rng: random.Random | None = None,
    ) -> None:
        self._resolver = resolver
        self._statistics = statistics
        self._rng = rng if rng is not None else random.Random()

    def load_template(self, persona: str, topic: str, locale: LocaleId) -> InterpretationTemplate:
        """Resolve candidates for every slot.

        Per slot: topic-specific variants, then persona-wide variants,
        then the built-in phrase. Each lookup walks the locale chain.
        """
        persona = str(persona)
        topic = str(topic)
        candidates: dict[TemplateSlot, tuple[str, ...]] = {}
        sources: dict[TemplateSlot, TemplateSource] = {}

        for slot in TemplateSlot:
            outcome = self._resolver.resolve_list(
                GUIDE_TEMPLATE,
                template_key(persona, topic, slot),
                locale,
                record_missing=False,
            )
            if outcome.value:
                candidates[slot] = outcome.value  # type: ignore[assignment]
                sources[slot] = TemplateSource.TOPIC
                continue

            outcome = self._resolver.resolve_list(
                GUIDE_TEMPLATE,
                template_key(persona, TEMPLATE_DEFAULT_TOPIC, slot),
                locale,
            )
            if outcome.value:
                candidates[slot] = outcome.value  # type: ignore[assignment]
                sources[slot] = TemplateSource.PERSONA_DEFAULT
            else:
                candidates[slot] = (_BUILT_IN_PHRASES[slot],)
                sources[slot] = TemplateSource.BUILT_IN
                logger.info(
                    "No '%s' template for persona '%s' (%s); using built-in phrase",
                    slot,
                    persona,
                    locale,
                )

        return InterpretationTemplate(
            persona=persona,
            topic=topic,
            locale=str(locale),
            candidates=MappingProxyType(candidates),
            sources=MappingProxyType(sources),
        )

    def fill(
        self,
        template: str,
        parameters: Mapping[str, object],
        *,
        key: str | None = None,
        locale: LocaleId | None = None,
    ) -> str:
        """Substitute parameters and record leftover placeholders."""
        missing = [name for name in find_placeholders(template) if name not in parameters]
        if missing:
            self._statistics.record_error(
                ErrorKind.PARAMETER_SUBSTITUTION_INCOMPLETE,
                key=key,
                locale=str(locale) if locale is not None else None,
                error=f"unresolved placeholders: {', '.join(dict.fromkeys(missing))}",
            )
        return substitute(template, parameters)

    def compose(
        self,
        persona: str,
        topic: str,
        locale: LocaleId,
        subject_name: str,
        orientation: str,
        *,
        keywords: Sequence[str] | None = None,
        meaning: str | None = None,
        parameters: Mapping[str, object] | None = None,
    ) -> str:
        """Compose the full interpretation text.

        Args:
            persona: Guide persona (e.g., 'sage')
            topic: Reading topic (e.g., 'love')
            locale: Resolved locale
            subject_name: Value for {name} (usually the card name)
            orientation: Value for {orientation}
            keywords: Optional keywords, joined into {keywords}
            meaning: Optional sentence placed between context and advice
            parameters: Extra placeholder values; override the defaults above

        Returns:
            Interpretation with paragraphs separated by blank lines
        """
        template = self.load_template(persona, topic, locale)

        values: dict[str, object] = {
            "name": subject_name,
            "orientation": orientation,
            "persona": str(persona),
            "topic": str(topic),
        }
        if keywords is not None:
            values["keywords"] = format_keywords(keywords, locale)
        if parameters:
            values.update(parameters)

        picked = {
            slot: self.fill(
                self._rng.choice(template.variants(slot)),
                values,
                key=template_key(template.persona, template.topic, slot),
                locale=locale,
            )
            for slot in TemplateSlot
        }

        body = SENTENCE_SEPARATOR.join(
            part for part in (picked[TemplateSlot.CONTEXT], meaning, picked[TemplateSlot.ADVICE])
            if part
        )
        return PARAGRAPH_SEPARATOR.join(
            (picked[TemplateSlot.OPENING], body, picked[TemplateSlot.CLOSING])
        )

    def validate_templates(
        self,
        personas: Iterable[str],
        locale: LocaleId,
    ) -> dict[str, tuple[str, ...]]:
        """Persona-wide template keys missing from locale's own document.

        Returns:
            Persona -> missing keys; personas with complete templates are omitted
        """
        report: dict[str, tuple[str, ...]] = {}
        for persona in personas:
            keys = [
                template_key(str(persona), TEMPLATE_DEFAULT_TOPIC, slot) for slot in TemplateSlot
            ]
            missing = self._resolver.missing_keys(GUIDE_TEMPLATE, keys, locale)
            if missing:
                report[str(persona)] = missing
        return report
