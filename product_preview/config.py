"""
Configuration management for the product preview service.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""
    
    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")  # json or console
    
    # Page fetch settings
    FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "10"))
    FETCH_MAX_REDIRECTS: int = int(os.getenv("FETCH_MAX_REDIRECTS", "5"))
    FETCH_USER_AGENT: str = os.getenv(
        "FETCH_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36",
    )
    FETCH_ACCEPT: str = os.getenv("FETCH_ACCEPT", "text/html,application/xhtml+xml")
    FETCH_ACCEPT_LANGUAGE: str = os.getenv(
        "FETCH_ACCEPT_LANGUAGE", "nb-NO,nb;q=0.9,en-US;q=0.8,en;q=0.7"
    )
    
    @classmethod
    def fetch_headers(cls) -> dict:
        """Browser-like request headers for page fetches."""
        return {
            "User-Agent": cls.FETCH_USER_AGENT,
            "Accept": cls.FETCH_ACCEPT,
            "Accept-Language": cls.FETCH_ACCEPT_LANGUAGE,
        }


config = Config()
