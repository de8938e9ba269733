"""Extraction confidence heuristic.

Additive score over the signals an extraction produced, capped at 1.0. It is
a quality proxy for labelling and caching decisions, not a probability.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from websearch.models.content import ExtractedContent


def score_confidence(content: ExtractedContent) -> float:
    score = 0.0

    if content.structured_data_blocks:
        score += 0.3
    if content.metadata.title:
        score += 0.2
    if content.metadata.description:
        score += 0.1

    main_length = len("".join(content.main_content))
    if main_length > 500:
        score += 0.3
    elif main_length > 200:
        score += 0.2
    elif main_length > 50:
        score += 0.1

    if content.site_profile is not None and content.site_profile.username:
        score += 0.1

    return min(round(score, 4), 1.0)
