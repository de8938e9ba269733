"""Plain-text rendering of extraction results and tool responses."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from websearch.models.content import ExtractedContent

SEPARATOR = "=" * 30
NO_CONTENT = "No content found"
DYNAMIC_SITE_CAVEAT = (
    "Note: this site loads much of its content with JavaScript. "
    "Dynamically loaded material may be missing from this result."
)
LOW_CONFIDENCE_NOTE = "Note: extraction confidence is low; content may be incomplete."


def render_content(content: ExtractedContent, *, max_structured_data_chars: int = 1000) -> str:
    """Render an ExtractedContent as the text that is cached and returned."""
    sections: list[str] = []

    meta = content.metadata
    meta_lines = [
        f"{label}: {value}"
        for label, value in (
            ("Title", meta.title),
            ("Description", meta.description),
            ("Author", meta.author),
            ("Published", meta.published_time),
            ("Image", meta.image),
        )
        if value
    ]
    if meta_lines:
        sections.append("\n".join(meta_lines))

    profile = content.site_profile
    if profile is not None:
        lines = ["Profile:"]
        if profile.display_name:
            lines.append(f"  Name: {profile.display_name}")
        if profile.username:
            lines.append(f"  Username: {profile.username}")
        if profile.bio:
            lines.append(f"  Bio: {profile.bio}")
        if profile.stats:
            stats = ", ".join(f"{key}: {value}" for key, value in profile.stats.items())
            lines.append(f"  Stats: {stats}")
        for item in profile.pinned_items:
            lines.append(f"  Pinned: {item}")
        sections.append("\n".join(lines))

    if content.headings:
        sections.append(
            "Headings:\n"
            + "\n".join(f"{'#' * heading.level} {heading.text}" for heading in content.headings)
        )

    if content.main_content:
        sections.append("Content:\n" + "\n\n".join(content.main_content))

    if content.structured_data_blocks:
        blocks = []
        for block in content.structured_data_blocks:
            if len(block) > max_structured_data_chars:
                block = block[:max_structured_data_chars] + "..."
            blocks.append(block)
        sections.append("Structured data:\n" + "\n".join(blocks))

    return "\n\n".join(sections) if sections else NO_CONTENT


def labelled(label: str, body: str) -> str:
    """Prefix ``body`` with a label line and the separator."""
    return f"{label}:\n{SEPARATOR}\n{body}"
