"""Catalog state: loading, readiness and the consult entry point."""
import asyncio
import random
import logging
from typing import Optional, Tuple

from archivist.async_client import AsyncCatalogClient
from archivist.client import CatalogClient
from archivist.errors import LoadFailure, NotReadyRejection
from archivist.matcher import match
from archivist.models import BookRecord, QueryResult
from archivist.parse import parse_catalog

logger = logging.getLogger(__name__)


class Archive:
    """Owns the loaded catalog and gates queries on it."""
    
    def __init__(
        self,
        client: Optional[CatalogClient] = None,
        delay: float = 1.5,
        fallback_pool: int = 200,
        min_score: float = 10,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize an empty, not-ready archive.
        
        Args:
            client: Client used by ``load``; a default one is created if omitted
            delay: Pause before scoring, in seconds
            fallback_pool: Catalog head size for random fallback picks
            min_score: Lowest score accepted as a real match
            rng: Random source for fallback picks
        """
        self.client = client
        self.delay = delay
        self.fallback_pool = fallback_pool
        self.min_score = min_score
        self.rng = rng
        self.ready = False
        self._catalog: Tuple[BookRecord, ...] = ()
    
    @property
    def catalog(self) -> Tuple[BookRecord, ...]:
        return self._catalog
    
    def install(self, text: Optional[str], source: str) -> int:
        """
        Parse catalog text and mark the archive ready.
        
        Args:
            text: Raw CSV, or None if the source was unreachable
            source: Where the text came from, for messages
            
        Returns:
            Number of records indexed
            
        Raises:
            LoadFailure: if the source was unreachable or held no valid rows
        """
        self.ready = False
        self._catalog = ()
        
        if text is None:
            raise LoadFailure(f"Could not read {source}")
        
        books = parse_catalog(text)
        if not books:
            raise LoadFailure(f"No valid records in {source}")
        
        self._catalog = tuple(books)
        self.ready = True
        logger.info(f"Archive ready: indexed {len(books)} volumes from {source}")
        return len(books)
    
    def load(self, source: str) -> int:
        """Load the catalog synchronously."""
        if self.client is None:
            self.client = CatalogClient()
        logger.info(f"Loading catalog from {source}")
        try:
            return self.install(self.client.fetch(source), source)
        except LoadFailure as e:
            logger.error(f"Failed to load catalog: {e}")
            raise
    
    async def aload(self, source: str, timeout: int = 10) -> int:
        """Load the catalog asynchronously."""
        logger.info(f"Loading catalog from {source}")
        async with AsyncCatalogClient(timeout=timeout) as client:
            text = await client.fetch(source)
        try:
            return self.install(text, source)
        except LoadFailure as e:
            logger.error(f"Failed to load catalog: {e}")
            raise
    
    def check_ready(self):
        """Raise NotReadyRejection unless a non-empty catalog is loaded."""
        if not self.ready or not self._catalog:
            logger.error("Query rejected: catalog is not loaded")
            raise NotReadyRejection()
    
    async def consult(self, query: str) -> QueryResult:
        """
        Answer a query after the configured pause.
        
        Overlapping calls are not de-duplicated; each one waits and scores
        independently.
        
        Raises:
            NotReadyRejection: before any waiting, if the catalog is not loaded
        """
        self.check_ready()
        
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        
        return match(
            query,
            self._catalog,
            rng=self.rng,
            fallback_pool=self.fallback_pool,
            min_score=self.min_score
        )
