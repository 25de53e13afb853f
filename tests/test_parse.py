"""Tests for catalog parsing."""
import pytest

from archivist.errors import LoadFailure
from archivist.parse import parse_catalog, parse_number, resolve_key

CSV_TEXT = """title,author,description,genres,characters,rating,awards,coverImg,numRatings
Emma (Illustrated),"Jane Austen, Anonymous",A matchmaker in Highbury,"Classics,Romance",Emma Woodhouse,4.0,,http://example.com/emma.jpg,1200
No Description Book,Someone,,Drama,,3.5,,,10
,Nobody,Description without a title,,,,,,
Dune,Frank Herbert,A desert planet epic of war and power,sci-fi,Paul Atreides,5,Hugo Award,,
"""


def test_parse_catalog_complete():
    """Test parsing a row with all fields present."""
    books = parse_catalog(CSV_TEXT)
    
    emma = books[0]
    assert emma.title == "Emma (Illustrated)"
    assert emma.author == "Jane Austen, Anonymous"
    assert emma.genres == "Classics,Romance"
    assert emma.characters == "Emma Woodhouse"
    assert emma.rating == "4.0"
    assert emma.cover_image == "http://example.com/emma.jpg"
    assert emma.num_ratings == "1200"


def test_parse_catalog_drops_invalid_rows():
    """Rows without title or description never reach the catalog."""
    books = parse_catalog(CSV_TEXT)
    
    assert [b.title for b in books] == ["Emma (Illustrated)", "Dune"]


def test_parse_catalog_defaults():
    """Missing optional fields get empty or "0" defaults."""
    text = "title,description\nMoby Dick,A whale of a tale\n"
    
    book = parse_catalog(text)[0]
    
    assert book.author is None
    assert book.genres == ""
    assert book.characters == ""
    assert book.rating == "0"
    assert book.awards == ""
    assert book.cover_image is None
    assert book.num_ratings == "0"


def test_parse_catalog_short_rows():
    """Rows shorter than the header fall back to defaults."""
    text = "title,description,genres,rating\nMoby Dick,A whale of a tale\n"
    
    book = parse_catalog(text)[0]
    
    assert book.genres == ""
    assert book.rating == "0"


def test_parse_catalog_case_insensitive_headers():
    """Title, description and author columns match regardless of case."""
    text = "Title,DESCRIPTION,Author\nEmma,A matchmaker,Jane Austen\n"
    
    book = parse_catalog(text)[0]
    
    assert book.title == "Emma"
    assert book.description == "A matchmaker"
    assert book.author == "Jane Austen"


def test_parse_catalog_byte_order_mark():
    """A leading BOM does not hide the title column."""
    text = "\ufefftitle,description\nEmma,A matchmaker\n"
    
    assert parse_catalog(text)[0].title == "Emma"


def test_parse_catalog_skips_blank_lines():
    """Blank lines are not rows."""
    text = "title,description\n\nEmma,A matchmaker\n\n"
    
    assert len(parse_catalog(text)) == 1


def test_parse_catalog_empty():
    """A header without rows is a load failure."""
    with pytest.raises(LoadFailure):
        parse_catalog("title,description\n")
    
    with pytest.raises(LoadFailure):
        parse_catalog("")


def test_parse_catalog_idempotent():
    """Parsing the same text twice gives the same records."""
    assert parse_catalog(CSV_TEXT) == parse_catalog(CSV_TEXT)


def test_resolve_key():
    """Header lookup falls back to the literal lowercase name."""
    assert resolve_key(["Title", "Author"], "title") == "Title"
    assert resolve_key(["Title", "Author"], "description") == "description"


def test_parse_number():
    """Leading numbers parse, everything else is zero."""
    assert parse_number("4.5") == 4.5
    assert parse_number(" 3") == 3.0
    assert parse_number("4.2 stars") == 4.2
    assert parse_number(".5") == 0.5
    assert parse_number("abc") == 0.0
    assert parse_number("") == 0.0
    assert parse_number(None) == 0.0
