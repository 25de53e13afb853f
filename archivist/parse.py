"""Parse and normalize catalog CSV data."""
import csv
import io
import re
import logging
from typing import Dict, List, Optional, Sequence

from archivist.errors import LoadFailure
from archivist.models import BookRecord

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def resolve_key(fieldnames: Sequence[str], name: str) -> str:
    """
    Find the header matching ``name`` regardless of case.
    
    Args:
        fieldnames: Header row
        name: Lowercase column name
        
    Returns:
        The header as written in the source, or ``name`` if none matches
    """
    for key in fieldnames:
        if key and key.lower() == name:
            return key
    return name


def parse_number(value: Optional[str]) -> float:
    """
    Parse the leading number of a string; anything else counts as 0.
    
    "4.5" -> 4.5, "4.2 stars" -> 4.2, "n/a" -> 0.0
    """
    if not value:
        return 0.0
    found = _LEADING_NUMBER.match(value)
    if not found:
        return 0.0
    return float(found.group(0))


def parse_row(row: Dict[str, Optional[str]], keys: Dict[str, str]) -> Optional[BookRecord]:
    """
    Normalize a single CSV row.
    
    Args:
        row: Row as produced by ``csv.DictReader``
        keys: Resolved column names for title, description and author
        
    Returns:
        BookRecord or None if title or description is missing
    """
    title = row.get(keys["title"])
    description = row.get(keys["description"])
    if not title or not description:
        return None
    
    return BookRecord(
        title=title,
        author=row.get(keys["author"]) or None,
        description=description,
        genres=row.get("genres") or "",
        characters=row.get("characters") or "",
        rating=row.get("rating") or "0",
        awards=row.get("awards") or "",
        cover_image=row.get("coverImg") or None,
        num_ratings=row.get("numRatings") or "0"
    )


def parse_catalog(text: str) -> List[BookRecord]:
    """
    Parse catalog CSV text into book records.
    
    Args:
        text: CSV with a header row
        
    Returns:
        Valid records in source order
        
    Raises:
        LoadFailure: if the text holds no data rows
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    rows = list(reader)
    
    if not rows:
        raise LoadFailure("Catalog loaded but appears empty")
    
    fieldnames = reader.fieldnames or []
    keys = {name: resolve_key(fieldnames, name) for name in ("title", "description", "author")}
    logger.debug(f"Mapping keys -> Title: {keys['title']!r}, Author: {keys['author']!r}")
    
    books = []
    for row in rows:
        book = parse_row(row, keys)
        if book:
            books.append(book)
    
    dropped = len(rows) - len(books)
    if dropped:
        logger.info(f"Dropped {dropped} rows without title or description")
    
    return books
