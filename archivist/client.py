"""Fetch catalog sources from disk or over HTTP with retries."""
import time
import random
import requests
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def is_remote(source: str) -> bool:
    """True for http(s) sources."""
    return source.startswith(("http://", "https://"))


def read_local(source: str) -> Optional[str]:
    """
    Read a catalog file from disk.
    
    Args:
        source: Filesystem path
        
    Returns:
        File contents or None if the file cannot be read
    """
    try:
        return Path(source).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {source}: {e}")
        return None


class CatalogClient:
    """Client for catalog sources with timeouts, retries, and backoff."""
    
    def __init__(
        self,
        timeout: int = 10,
        max_retries: int = 3,
        base_backoff: float = 1.0
    ):
        """
        Initialize catalog client.
        
        Args:
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            base_backoff: Base delay for exponential backoff
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_backoff = base_backoff
        
        # Create session for connection pooling
        self.session = requests.Session()
    
    def fetch(self, source: str) -> Optional[str]:
        """
        Fetch raw catalog text.
        
        Args:
            source: Filesystem path or http(s) URL
            
        Returns:
            Catalog text or None if the source is unreachable
        """
        if is_remote(source):
            return self._make_request_with_retry(source)
        return read_local(source)
    
    def _make_request_with_retry(self, url: str) -> Optional[str]:
        """
        Make HTTP request with retry logic.
        
        Args:
            url: Request URL
            
        Returns:
            Response text or None if all retries exhausted
        """
        for attempt in range(self.max_retries):
            try:
                logger.info(f"Request attempt {attempt + 1}/{self.max_retries}: {url}")
                
                response = self.session.get(url, timeout=self.timeout)
                
                if response.status_code == 200:
                    logger.info(f"Success: {response.status_code}")
                    return response.text
                
                elif response.status_code == 429:
                    logger.warning(f"Rate limited (429) on attempt {attempt + 1}")
                    if attempt < self.max_retries - 1:
                        self._backoff(attempt)
                        continue
                
                elif response.status_code >= 500:
                    logger.warning(f"Server error ({response.status_code}) on attempt {attempt + 1}")
                    if attempt < self.max_retries - 1:
                        self._backoff(attempt)
                        continue
                
                elif response.status_code >= 400:
                    # Client error - don't retry
                    logger.error(f"Client error ({response.status_code}) for {url}")
                    return None
            
            except requests.exceptions.Timeout:
                logger.warning(f"Timeout on attempt {attempt + 1}")
                if attempt < self.max_retries - 1:
                    self._backoff(attempt)
                    continue
            
            except requests.exceptions.ConnectionError as e:
                logger.warning(f"Connection error on attempt {attempt + 1}: {e}")
                if attempt < self.max_retries - 1:
                    self._backoff(attempt)
                    continue
        
        logger.error(f"All {self.max_retries} attempts failed")
        return None
    
    def _backoff(self, attempt: int):
        """
        Sleep with exponential backoff and jitter.
        
        Args:
            attempt: Current attempt number (0-indexed)
        """
        delay = self.base_backoff * (2 ** attempt)
        jitter = random.uniform(0, delay)
        total_delay = delay + jitter
        
        logger.info(f"Backing off for {total_delay:.2f} seconds")
        time.sleep(total_delay)
    
    def close(self):
        """Close the session."""
        self.session.close()
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
