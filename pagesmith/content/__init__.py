"""Content models and front matter parsing."""

from .models import CollectionEntry, FrontMatter, Include, Page
from .parsers import parse_document, split_front_matter, validate_front_matter

__all__ = [
    "CollectionEntry",
    "FrontMatter",
    "Include",
    "Page",
    "parse_document",
    "split_front_matter",
    "validate_front_matter",
]
