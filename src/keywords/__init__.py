"""
Keyword extraction using the TextRank pipeline.

Components:
- KeywordsConfig: Configuration for the keywords service
- ExtractedKeyword: Dataclass representing an extracted keyword
- KeywordsService: Service facade over TextRank.add_text
"""

from src.keywords.config import KeywordsConfig
from src.keywords.schemas import ExtractedKeyword
from src.keywords.service import KeywordsService

__all__ = [
    "KeywordsConfig",
    "ExtractedKeyword",
    "KeywordsService",
]
