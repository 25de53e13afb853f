"""Async catalog fetching."""
import httpx
from typing import Optional
import logging

from archivist.client import is_remote, read_local

logger = logging.getLogger(__name__)


class AsyncCatalogClient:
    """Async client used to load the catalog at startup."""
    
    def __init__(self, timeout: int = 10):
        """
        Initialize async client.
        
        Args:
            timeout: Request timeout
        """
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout)
    
    async def fetch(self, source: str) -> Optional[str]:
        """
        Fetch catalog text asynchronously.
        
        Args:
            source: Filesystem path or http(s) URL
            
        Returns:
            Catalog text or None
        """
        if not is_remote(source):
            return read_local(source)
        
        try:
            logger.info(f"Async request: {source}")
            response = await self.client.get(source)
            
            if response.status_code == 200:
                return response.text
            else:
                logger.warning(f"Status {response.status_code} for source: {source}")
                return None
        
        except httpx.HTTPError as e:
            logger.error(f"Async request failed: {e}")
            return None
    
    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
