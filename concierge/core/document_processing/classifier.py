"""Metadata classification for ingested documents.

Derives a display title from the source filename, a short summary from the
cleaned content, topic tags from a keyword rule table and a URL-safe slug.
All functions are pure.
"""

import os
import re

from pydantic import BaseModel, Field

MAX_TITLE_CHARS = 150
TITLE_BREAK_PHRASES = [" - ", " and ", " with ", " for "]
TITLE_BREAK_MIN_INDEX = 30
TITLE_BREAK_MAX_INDEX = 120

SUMMARY_MIN_PARAGRAPH_CHARS = 100
SUMMARY_MAX_CHARS = 300

ARTICLE_SLUG_MAX_CHARS = 100
CASE_STUDY_SLUG_MAX_CHARS = 80

DEFAULT_TOPIC = "insights"

# (topic slug, keywords); a rule fires when any keyword is a substring of the
# lower-cased content + filename
TOPIC_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("newsletter", ("newsletter", "human conditions")),
    ("careers", ("career", "jobs", "hiring")),
    ("thought-leadership", ("framework", "guide", "strategy", "glossary")),
    ("marketing", ("marketing", "brand")),
    ("ai", ("ai", "generative", "technology")),
    ("creative", ("creative", "storytelling")),
    ("social", ("linkedin", "posts")),
]

TOPIC_NAMES = {
    "newsletter": "Newsletter",
    "careers": "Careers",
    "thought-leadership": "Thought Leadership",
    "marketing": "Marketing",
    "ai": "AI & Technology",
    "creative": "Creative",
    "social": "Social Media",
    "insights": "Insights",
    "case-study": "Case Study",
}

_ALL_CAPS_RE = re.compile(r"[A-Z\s]+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


class ClassificationResult(BaseModel):
    """Metadata derived for one document."""

    title: str
    slug: str
    summary: str | None = None
    topics: list[str] = Field(default_factory=list)


def topic_display_name(slug: str) -> str:
    """Human name for a topic slug; unknown slugs are title-cased."""
    if slug in TOPIC_NAMES:
        return TOPIC_NAMES[slug]
    return " ".join(word.capitalize() for word in slug.split("-"))


def derive_title(filename: str) -> str:
    """
    Turn a descriptive source filename into a display title.

    Underscores become spaces and hyphens become " - ". Titles longer than
    MAX_TITLE_CHARS are cut at the first break phrase found between index 30
    and 120, falling back to a hard cut with an ellipsis.

    Args:
        filename: File name, with or without extension

    Returns:
        Title of at most MAX_TITLE_CHARS characters
    """
    stem, _ = os.path.splitext(os.path.basename(filename))
    title = stem.replace("_", " ").replace("-", " - ").strip()

    if len(title) > MAX_TITLE_CHARS:
        for phrase in TITLE_BREAK_PHRASES:
            idx = title.find(phrase)
            if TITLE_BREAK_MIN_INDEX < idx < TITLE_BREAK_MAX_INDEX:
                title = title[:idx]
                break

    if len(title) > MAX_TITLE_CHARS:
        title = title[: MAX_TITLE_CHARS - 3] + "..."

    return title


def extract_summary(content: str) -> str | None:
    """First substantial, non-header paragraph, capped at SUMMARY_MAX_CHARS."""
    for paragraph in content.split("\n\n"):
        paragraph = paragraph.strip()
        if len(paragraph) <= SUMMARY_MIN_PARAGRAPH_CHARS:
            continue
        if _ALL_CAPS_RE.fullmatch(paragraph):
            continue
        return paragraph[:SUMMARY_MAX_CHARS]
    return None


def classify_topics(content: str, filename: str) -> list[str]:
    """
    Assign topic slugs by keyword rules.

    Returns:
        Fired topic slugs in rule-table order, or [DEFAULT_TOPIC]
    """
    haystack = f"{content} {filename}".lower()
    topics = [
        slug
        for slug, keywords in TOPIC_RULES
        if any(keyword in haystack for keyword in keywords)
    ]
    return topics or [DEFAULT_TOPIC]


def generate_slug(text: str, max_length: int = ARTICLE_SLUG_MAX_CHARS) -> str:
    """Lower-case, hyphen-separated slug of at most max_length characters."""
    slug = _NON_SLUG_RE.sub("-", text.lower()).strip("-")
    return slug[:max_length].strip("-")


def case_study_slug(client: str, title: str) -> str:
    """Slug for a client case study, e.g. ("Google", "Think Week") -> "google-think-week"."""
    return generate_slug(f"{client} {title}", max_length=CASE_STUDY_SLUG_MAX_CHARS)


def classify_document(filename: str, content: str) -> ClassificationResult:
    """Derive title, slug, summary and topics for an article."""
    title = derive_title(filename)
    return ClassificationResult(
        title=title,
        slug=generate_slug(title),
        summary=extract_summary(content),
        topics=classify_topics(content, filename),
    )
