"""Score catalog records against a free-text query."""
import math
import random
import re
import logging
from typing import List, Optional, Sequence, Tuple

from archivist.concepts import expand_terms, split_terms
from archivist.errors import NotReadyRejection
from archivist.models import BookRecord, CoverInfo, QueryResult, Recommendation
from archivist.parse import parse_number

logger = logging.getLogger(__name__)

EXACT_TITLE_BONUS = 100
TITLE_CONTAINS_BONUS = 50
DESCRIPTION_WEIGHT = 5
GENRE_WEIGHT = 15
CHARACTER_WEIGHT = 20
RATING_WEIGHT = 5
AWARDS_BONUS = 10
MIN_TERM_LENGTH = 3

_PARENTHESIZED = re.compile(r"\s*\(.*?\)\s*")


def score_book(book: BookRecord, query: str, terms: Sequence[str]) -> float:
    """
    Score one record.
    
    Args:
        book: Catalog record
        query: Raw query
        terms: Expanded query terms
        
    Returns:
        Relevance score (title hits, term hits, rating and awards bias)
    """
    score = 0.0
    lowered = query.lower()
    
    title = book.title.lower()
    desc = book.description.lower()
    genres = book.genres.lower()
    chars = book.characters.lower()
    
    if title == lowered:
        score += EXACT_TITLE_BONUS
    if lowered in title:
        score += TITLE_CONTAINS_BONUS
    
    for term in terms:
        if len(term) < MIN_TERM_LENGTH:
            continue
        if term in desc:
            score += DESCRIPTION_WEIGHT
        if term in genres:
            score += GENRE_WEIGHT
        if term in chars:
            score += CHARACTER_WEIGHT
    
    if book.rating:
        score += parse_number(book.rating) * RATING_WEIGHT
    if book.awards and len(book.awards) > 5:
        score += AWARDS_BONUS
    
    return score


def find_best_match(
    query: str,
    catalog: Sequence[BookRecord]
) -> Tuple[Optional[BookRecord], float]:
    """
    Return the first record reaching the highest score.
    
    Ties keep the earlier record. An empty catalog gives (None, -inf).
    """
    terms = expand_terms(split_terms(query))
    logger.debug(f"Expanded {query!r} into {len(terms)} terms")
    
    best_match = None
    highest_score = -math.inf
    
    for book in catalog:
        score = score_book(book, query, terms)
        if score > highest_score:
            highest_score = score
            best_match = book
    
    return best_match, highest_score


def pick_fallback(
    catalog: Sequence[BookRecord],
    rng: Optional[random.Random] = None,
    pool_size: int = 200
) -> BookRecord:
    """Pick uniformly from the first ``pool_size`` records in load order."""
    rng = rng or random
    pool = min(pool_size, len(catalog))
    return catalog[math.floor(rng.random() * pool)]


def clean_title(title: str) -> str:
    """Strip parenthesized parts: "Emma (Illustrated)" -> "Emma"."""
    return _PARENTHESIZED.sub("", title).strip()


def clean_author(author: Optional[str]) -> str:
    """First listed author, or "Unknown"."""
    return author.split(",")[0] if author else "Unknown"


def round_score(score: float) -> int:
    """Round halves away from zero."""
    return int(math.copysign(math.floor(abs(score) + 0.5), score))


def build_reason(score: float, book: BookRecord) -> str:
    """Diagnostic line shown under the recommendation."""
    return f"// SYSTEM_OUTPUT: MATCH_SCORE_{round_score(score)} // GENRE_DETECTED: [{book.first_genre}]"


def match(
    query: str,
    catalog: Sequence[BookRecord],
    rng: Optional[random.Random] = None,
    fallback_pool: int = 200,
    min_score: float = 10
) -> QueryResult:
    """
    Pick the best book for a query.
    
    When nothing scores at least ``min_score`` the winner is discarded and
    a random record from the head of the catalog is returned instead.
    
    Args:
        query: Free-text query
        catalog: Loaded records
        rng: Random source for the fallback pick
        fallback_pool: Size of the catalog head the fallback draws from
        min_score: Lowest score accepted as a real match
        
    Returns:
        QueryResult for the chosen record
        
    Raises:
        NotReadyRejection: if the catalog is empty
    """
    if not catalog:
        raise NotReadyRejection()
    
    best_match, highest_score = find_best_match(query, catalog)
    
    fallback = best_match is None or highest_score < min_score
    if fallback:
        logger.info(f"Best score {highest_score} below {min_score}, picking at random")
        best_match = pick_fallback(catalog, rng, fallback_pool)
    
    return QueryResult(
        recommendation=Recommendation(
            title=clean_title(best_match.title),
            author=clean_author(best_match.author),
            reason=build_reason(highest_score, best_match)
        ),
        cover=CoverInfo(
            cover_url=best_match.cover_image or None,
            rating=best_match.rating,
            count=best_match.num_ratings
        ),
        score=highest_score,
        fallback=fallback
    )
