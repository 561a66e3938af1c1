"""Quickstart example for contentlex.

This example demonstrates basic usage of contentlex: string lookups with
locale fallback, the journal prompt of the day, and a composed
interpretation, over JSON documents written to a temporary directory.

Note: Lookups never raise for missing or broken content. In production,
check get_error_statistics() periodically and report translation gaps.
"""

import json
import logging
import tempfile
from datetime import date
from pathlib import Path

from contentlex import ContentLocalization, EngineConfig, PathDocumentSource

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

CORPUS = {
    "en": {
        "card-name": {"the_fool": "The Fool", "the_star": "The Star", "the_moon": "The Moon"},
        "card-keywords": {"the_star": ["hope", "renewal", "serenity"]},
        "journal-prompt": {
            "daily": [
                "What are you grateful for today?",
                "What would you do if you were not afraid?",
                "What are you ready to let go of?",
            ],
        },
        "guide-template": {
            "sage.default.opening": ["The ancient wisdom speaks.", "Listen closely."],
            "sage.default.context": ["{name} appears {orientation}, speaking of {keywords}."],
            "sage.default.advice": ["Reflect on your {topic}."],
            "sage.default.closing": ["Walk in wisdom."],
        },
    },
    "es": {
        "card-name": {"the_fool": "El Loco", "the_star": "La Estrella"},
        "card-keywords": {"the_star": ["esperanza", "renovación", "serenidad"]},
        "journal-prompt": {
            "daily": [
                "¿Por qué estás agradecido hoy?",
                "¿Qué harías si no tuvieras miedo?",
                "¿Qué estás listo para soltar?",
            ],
        },
    },
}

with tempfile.TemporaryDirectory() as tmpdir:
    root = Path(tmpdir)
    for locale, domains in CORPUS.items():
        (root / locale).mkdir()
        for domain, payload in domains.items():
            (root / locale / f"{domain}.json").write_text(
                json.dumps(payload, ensure_ascii=False), encoding="utf-8"
            )

    l10n = ContentLocalization(
        PathDocumentSource(f"{root}/{{locale}}"),
        EngineConfig.from_codes(["en", "es"], default="en"),
    )

    # Example 1: Fallback chain
    print("=" * 50)
    print("Example 1: Fallback Chain")
    print("=" * 50)

    print(l10n.resolve_string("card-name", "the_fool", "es-MX"))
    # Output: El Loco
    print(l10n.resolve_string("card-name", "the_moon", "es"))
    # Output: The Moon  (base language)
    print(l10n.resolve_string("card-name", "wheel_of_fortune", "es"))
    # Output: Wheel Of Fortune  (formatted key)

    # Example 2: Prompt of the day
    print("\n" + "=" * 50)
    print("Example 2: Prompt of the Day")
    print("=" * 50)

    day = date(2024, 1, 15)
    print(l10n.daily_rotating_string("journal-prompt", "daily", day, "en"))
    print(l10n.daily_rotating_string("journal-prompt", "daily", day, "es"))
    # Both locales show the same position on the same day

    # Example 3: Interpretation
    print("\n" + "=" * 50)
    print("Example 3: Interpretation")
    print("=" * 50)

    print(
        l10n.compose_interpretation(
            "sage",
            "love",
            "en",
            l10n.resolve_string("card-name", "the_star", "en"),
            "upright",
            keywords=l10n.resolve_list("card-keywords", "the_star", "en"),
        )
    )

    # Example 4: Health statistics
    print("\n" + "=" * 50)
    print("Example 4: Statistics")
    print("=" * 50)

    stats = l10n.get_error_statistics()
    print(stats.to_dict())
    print("error rate high:", l10n.is_error_rate_high())
