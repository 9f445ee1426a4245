#!/usr/bin/env python3
"""
Text utilities for feed content.

Markup escaping for the XML renderer, HTML-to-snippet conversion for
upstream descriptions, length truncation and the normalized title key
used for deduplication.
"""

import re
import logging
from typing import Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Reserved markup characters and their entity replacements
XML_ESCAPE_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}

XML_ESCAPE_TRANSLATION = str.maketrans(XML_ESCAPE_MAP)

ELLIPSIS = "..."

# Anything that is not a letter, digit or whitespace (\w also admits "_")
_TITLE_KEY_STRIP = re.compile(r"[^\w\s]|_")


def escape_xml(text: Optional[str]) -> str:
    """
    Escape the five reserved XML characters.

    Single-pass translation, so "&" produced by an entity is never
    escaped twice.

    Args:
        text: Raw text, may be None

    Returns:
        Escaped text ("" for None or empty input)
    """
    if not text:
        return ""

    return text.translate(XML_ESCAPE_TRANSLATION)


def truncate_text(text: Optional[str], max_length: int, marker: str = ELLIPSIS) -> str:
    """Cut text to max_length characters, appending marker when cut."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + marker


def html_to_snippet(html: Optional[str]) -> str:
    """
    Convert an HTML fragment into plain snippet text.

    Tags are dropped and whitespace runs collapsed. Text without markup is
    returned stripped, without going through the HTML parser.
    """
    if not html:
        return ""

    if "<" not in html and "&" not in html:
        return " ".join(html.split())

    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())


def normalize_title_key(title: Optional[str]) -> str:
    """
    Build the deduplication key for a headline.

    Lower-cases the title and removes every character that is not a letter,
    digit or whitespace. "Fed Raises Rates" and "fed raises rates!!" share
    the key "fed raises rates".
    """
    if not title:
        return ""

    return _TITLE_KEY_STRIP.sub("", title.lower())
