"""Tests for catalog loading and the readiness gate."""
import asyncio

import pytest

from archivist.archive import Archive
from archivist.errors import LoadFailure, NotReadyRejection

CSV_TEXT = """Title,Author,Description,genres,rating,awards
Dune,Frank Herbert,A desert planet epic of war and power,sci-fi,5,Hugo Award
Emma (Illustrated),"Jane Austen, Anonymous",A matchmaker in Highbury,Classics,4.0,
"""


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "books.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return str(path)


def test_consult_before_load_is_rejected():
    """Queries never run against an unloaded archive."""
    archive = Archive(delay=1000)
    
    with pytest.raises(NotReadyRejection):
        asyncio.run(archive.consult("future war"))


def test_load_marks_ready(catalog_file):
    """A successful load installs the catalog."""
    archive = Archive(delay=0)
    
    count = archive.load(catalog_file)
    
    assert count == 2
    assert archive.ready
    assert isinstance(archive.catalog, tuple)
    assert archive.catalog[0].title == "Dune"


def test_load_is_idempotent(catalog_file):
    """Reloading unchanged input yields the same records."""
    archive = Archive(delay=0)
    archive.load(catalog_file)
    first = archive.catalog
    
    archive.load(catalog_file)
    
    assert archive.catalog == first


def test_load_missing_file():
    """An unreachable source is a load failure and leaves the archive not ready."""
    archive = Archive(delay=0)
    
    with pytest.raises(LoadFailure):
        archive.load("/nonexistent/books.csv")
    
    assert not archive.ready
    with pytest.raises(NotReadyRejection):
        asyncio.run(archive.consult("anything"))


def test_load_without_valid_rows(tmp_path):
    """A catalog with only invalid rows is a load failure."""
    path = tmp_path / "books.csv"
    path.write_text("title,description\nNo Description,\n", encoding="utf-8")
    archive = Archive(delay=0)
    
    with pytest.raises(LoadFailure):
        archive.load(str(path))
    
    assert not archive.ready


def test_failed_reload_clears_catalog(catalog_file, tmp_path):
    """A failed reload does not keep serving the previous catalog."""
    archive = Archive(delay=0)
    archive.load(catalog_file)
    
    with pytest.raises(LoadFailure):
        archive.load(str(tmp_path / "missing.csv"))
    
    assert not archive.ready
    assert archive.catalog == ()


def test_aload_and_consult(catalog_file):
    """Async load followed by a query."""
    archive = Archive(delay=0)
    
    async def run():
        await archive.aload(catalog_file)
        return await archive.consult("future war")
    
    result = asyncio.run(run())
    
    assert result.recommendation.title == "Dune"
    assert result.score == 55


def test_consult_waits_for_delay(catalog_file, monkeypatch):
    """The configured pause happens before scoring."""
    waits = []
    
    async def fake_sleep(seconds):
        waits.append(seconds)
    
    monkeypatch.setattr("archivist.archive.asyncio.sleep", fake_sleep)
    archive = Archive(delay=1.5)
    archive.load(catalog_file)
    
    result = asyncio.run(archive.consult("emma"))
    
    assert waits == [1.5]
    assert result.recommendation.title == "Emma"
    assert result.recommendation.author == "Jane Austen"


def test_overlapping_consults(catalog_file):
    """Concurrent queries each produce their own result."""
    archive = Archive(delay=0.01)
    archive.load(catalog_file)
    
    async def run():
        return await asyncio.gather(
            archive.consult("future war"),
            archive.consult("emma")
        )
    
    dune, emma = asyncio.run(run())
    
    assert dune.recommendation.title == "Dune"
    assert emma.recommendation.title == "Emma"


def test_load_undecodable_file(tmp_path):
    """A catalog that is not UTF-8 is a load failure, not a crash."""
    path = tmp_path / "books.csv"
    path.write_bytes(b"title,description\nCaf\xe9,A caf\xe9 story\n")
    archive = Archive(delay=0)
    
    with pytest.raises(LoadFailure):
        archive.load(str(path))
    
    assert not archive.ready
