"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""
    
    # Catalog
    CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", "books.csv")
    
    # Matching
    CONSULT_DELAY = float(os.getenv("CONSULT_DELAY", "1.5"))
    FALLBACK_POOL_SIZE = int(os.getenv("FALLBACK_POOL_SIZE", "200"))
    MIN_MATCH_SCORE = float(os.getenv("MIN_MATCH_SCORE", "10"))
    
    # Fetching
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    DEFAULT_MAX_RETRIES = int(os.getenv("DEFAULT_MAX_RETRIES", "3"))
