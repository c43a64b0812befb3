"""
Latest-ad slot and context formatting.
"""

import re

from .types import Ad

DEFAULT_CONTEXT_TEMPLATE = (
    "Here is a product the user might like: {ad_title} - {ad_description}: "
    "here is a sample way to present it: {placement_template}"
)

PLACEHOLDER_PATTERN = re.compile(r"\{(ad_title|ad_description|placement_template|link)\}")


def format_context(ad: Ad, template: str = DEFAULT_CONTEXT_TEMPLATE) -> str:
    """
    Substitute ad fields into a context template.

    Recognized placeholders are ``{ad_title}``, ``{ad_description}``,
    ``{placement_template}`` and ``{link}``. Anything else in braces is left
    as-is, and substituted values are never re-expanded.
    """
    values = {
        "ad_title": ad.ad_title,
        "ad_description": ad.ad_description,
        "placement_template": ad.placement_template,
        "link": ad.link,
    }
    return PLACEHOLDER_PATTERN.sub(lambda m: values[m.group(1)], template)


class AdCache:
    """Single slot holding the most recently fetched ad."""

    def __init__(self):
        self._ad: Ad | None = None

    def store(self, ad: Ad) -> None:
        self._ad = ad

    def clear(self) -> None:
        self._ad = None

    def peek(self) -> Ad | None:
        """Return the cached ad without consuming it."""
        return self._ad

    def get_latest_and_clear(self) -> Ad | None:
        """Return the cached ad (if any) and empty the slot."""
        ad, self._ad = self._ad, None
        return ad
