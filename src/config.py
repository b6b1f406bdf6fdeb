"""
Configuration module for the PawPrint matching service.

Loads environment variables and provides configuration singletons.
Uses pydantic for validation.
"""

from pydantic_settings import BaseSettings
from typing import Optional
import os

from src.models.criteria import DEFAULT_SEARCH_RADIUS_KM
from src.tools.scoring_tools import MATCH_SCORE_THRESHOLD, MAX_MATCH_RESULTS
from src.utils.geo import NEAR_ME_RADIUS_KM


class Config(BaseSettings):
    """
    Application configuration loaded from environment variables.

    All values come from .env file or system environment.
    Type hints provide validation (pydantic converts types automatically).
    """

    # ============================================================
    # FIREBASE CONFIGURATION (REQUIRED)
    # ============================================================
    FIREBASE_PROJECT_ID: str = ""
    """Firebase project holding the reports collection."""

    GOOGLE_APPLICATION_CREDENTIALS: str = "/config/serviceAccountKey.json"
    """Path to Firebase service account JSON file."""

    # ============================================================
    # LLM CONFIGURATION (IMAGE ANALYSIS, OPTIONAL)
    # ============================================================
    PERPLEXITY_API_KEY: Optional[str] = None
    """Perplexity API key. Primary provider for photo analysis when set."""

    PERPLEXITY_MODEL: str = "sonar"
    """Perplexity model. Must accept image input."""

    OPENAI_API_KEY: Optional[str] = None
    """OpenAI API key (fallback if Perplexity not available)."""

    OPENAI_MODEL: Optional[str] = "gpt-4o-mini"
    """OpenAI vision-capable model used for photo analysis."""

    # ============================================================
    # GRAPH CONFIGURATION
    # ============================================================
    GRAPH_TIMEOUT: int = 30
    """Maximum seconds a graph can run before timeout. Default: 30 seconds."""

    MAX_REPORTS: int = 500
    """Maximum reports to fetch from Firestore per graph run."""

    # ============================================================
    # MATCHING CONFIGURATION
    # ============================================================
    NEAR_ME_RADIUS_KM: float = NEAR_ME_RADIUS_KM
    """Radius for the home feed "near me" sections."""

    DEFAULT_SEARCH_RADIUS_KM: float = DEFAULT_SEARCH_RADIUS_KM
    """Search radius used when a request sets a center but no radius."""

    MATCH_SCORE_THRESHOLD: float = MATCH_SCORE_THRESHOLD
    """Scan matches must score strictly above this (0-100 scale)."""

    MAX_MATCH_RESULTS: int = MAX_MATCH_RESULTS
    """Maximum scan matches returned."""

    # ============================================================
    # SECURITY CONFIGURATION
    # ============================================================
    AI_SERVICE_TOKEN: str = os.getenv("AI_SERVICE_TOKEN", "")
    """Shared secret for authenticating requests from the app backend."""

    # ============================================================
    # SERVER CONFIGURATION
    # ============================================================
    PORT: int = 8000
    """Port to run FastAPI server on. Default: 8000."""

    HOST: str = "0.0.0.0"
    """Host to bind to. 0.0.0.0 = accessible from network."""

    DEBUG: bool = False
    """Enable debug logging. Set True for development, False for production."""

    class Config:
        """Pydantic configuration."""
        env_file = ".env"  # Read from .env file
        case_sensitive = True  # Variable names are case-sensitive
        extra = "ignore"  # Ignore extra env vars not defined above


# ============================================================
# SINGLETON INSTANCE
# ============================================================
# Load config once at startup, reuse throughout app
config = Config()


# ============================================================
# VALIDATION AT STARTUP
# ============================================================
def validate_config() -> dict:
    """
    Validate that required config values are set.

    Called at app startup to fail fast if config is incomplete.

    Returns:
        dict: Status of each configured integration

    Raises:
        ValueError: If required config is missing or inconsistent
    """
    errors = []

    if not config.FIREBASE_PROJECT_ID:
        errors.append("FIREBASE_PROJECT_ID is required")

    if config.MAX_MATCH_RESULTS < 1:
        errors.append("MAX_MATCH_RESULTS must be at least 1")

    if config.NEAR_ME_RADIUS_KM <= 0 or config.DEFAULT_SEARCH_RADIUS_KM <= 0:
        errors.append("NEAR_ME_RADIUS_KM and DEFAULT_SEARCH_RADIUS_KM must be positive")

    if errors:
        raise ValueError(f"Configuration errors:\n" + "\n".join([f"  - {e}" for e in errors]))

    # Without an LLM key, scan requests must supply a precomputed probe.
    return {
        "firebase": "✓ Configured" if config.FIREBASE_PROJECT_ID else "✗ Missing",
        "perplexity": "✓ Configured" if config.PERPLEXITY_API_KEY else "✗ Not set",
        "openai": "✓ Configured" if config.OPENAI_API_KEY else "✗ Not set",
    }


if __name__ == "__main__":
    """Allow testing config by running: python -m src.config"""
    try:
        status = validate_config()
        print("✅ Configuration is valid!")
        print("\nConfiguration Status:")
        for key, value in status.items():
            print(f"  {key}: {value}")
    except ValueError as e:
        print(f"❌ Configuration error:\n{e}")
        exit(1)
