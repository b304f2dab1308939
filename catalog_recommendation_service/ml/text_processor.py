"""Text processing utilities for catalog content."""
import re
import pandas as pd
from typing import Iterable, List, Optional

from catalog_recommendation_service.engine.types import ContentItem


def clean_html(text: str | None) -> str:
    """
    Remove HTML tags from text.

    Args:
        text: Raw text possibly containing HTML (can be None)

    Returns:
        Cleaned text without HTML tags
    """
    if pd.isna(text):
        return ""

    text = re.sub(r'<[^>]+>', '', str(text))
    text = re.sub(r'\s+', ' ', text)

    return text.strip()


def clean_texts(texts: Iterable[Optional[str]]) -> List[str]:
    """
    Clean a list of texts by removing HTML tags.

    Args:
        texts: Raw texts

    Returns:
        List of cleaned texts
    """
    return [clean_html(text) for text in texts]


def build_document_text(item: ContentItem) -> str:
    """
    Build the text used for TF-IDF relevance: title, overview,
    genre names and keyword names.

    Args:
        item: Content item

    Returns:
        Single cleaned document string
    """
    parts = [item.title, item.overview]
    parts.extend(genre.name for genre in item.genres)
    parts.extend(keyword.name for keyword in item.keywords)

    return " ".join(text for text in clean_texts(parts) if text)
