"""Data models for catalog records and query results."""
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class BookRecord:
    """One normalized catalog row."""
    title: str
    author: Optional[str]
    description: str
    genres: str = ""
    characters: str = ""
    rating: str = "0"
    awards: str = ""
    cover_image: Optional[str] = None
    num_ratings: str = "0"
    
    @property
    def first_genre(self) -> str:
        """First listed genre, or N/A."""
        return self.genres.split(",")[0] if self.genres else "N/A"


@dataclass
class Recommendation:
    """Text part of a result."""
    title: str
    author: str
    reason: str


@dataclass
class CoverInfo:
    """Cover and rating part of a result."""
    cover_url: Optional[str]
    rating: str
    count: str


@dataclass
class QueryResult:
    """Display-ready answer to a single query."""
    recommendation: Recommendation
    cover: CoverInfo
    score: float
    fallback: bool = False
    
    def to_dict(self) -> Dict[str, Any]:
        """Structure handed to a renderer."""
        return {
            "recommendation": {
                "title": self.recommendation.title,
                "author": self.recommendation.author,
                "reason": self.recommendation.reason
            },
            "cover": {
                "coverUrl": self.cover.cover_url,
                "rating": self.cover.rating,
                "count": self.cover.count
            }
        }
