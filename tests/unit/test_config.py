"""
Unit tests for configuration loading and validation.

These tests ensure:
  1. Config loads from environment variables correctly
  2. Matching defaults mirror the constants used by the pure functions
  3. Type conversions work (e.g., strings to floats)
  4. Helpful error messages are provided for missing config
"""

import pytest
from unittest.mock import patch

from src.config import Config, validate_config
from src.models.criteria import DEFAULT_SEARCH_RADIUS_KM
from src.tools.scoring_tools import MATCH_SCORE_THRESHOLD, MAX_MATCH_RESULTS
from src.utils.geo import NEAR_ME_RADIUS_KM


class TestConfigLoading:
    """Test configuration loading from environment."""

    @patch.dict("os.environ", {"FIREBASE_PROJECT_ID": "pawprint-test"})
    def test_required_config_loads(self):
        config = Config(_env_file=None)
        assert config.FIREBASE_PROJECT_ID == "pawprint-test"

    @patch.dict("os.environ", {"PORT": "9000", "NEAR_ME_RADIUS_KM": "25"})
    def test_type_conversion(self):
        config = Config(_env_file=None)
        assert config.PORT == 9000
        assert config.NEAR_ME_RADIUS_KM == 25.0

    def test_matching_defaults(self):
        config = Config(_env_file=None)
        assert config.NEAR_ME_RADIUS_KM == NEAR_ME_RADIUS_KM == 50
        assert config.DEFAULT_SEARCH_RADIUS_KM == DEFAULT_SEARCH_RADIUS_KM == 5
        assert config.MATCH_SCORE_THRESHOLD == MATCH_SCORE_THRESHOLD == 60
        assert config.MAX_MATCH_RESULTS == MAX_MATCH_RESULTS == 3

    def test_optional_config_defaults(self):
        config = Config(_env_file=None)
        assert config.GRAPH_TIMEOUT == 30
        assert isinstance(config.DEBUG, bool)


class TestConfigValidation:
    """Test configuration validation function."""

    @patch("src.config.config")
    def test_validate_firebase_required(self, mock_config):
        mock_config.FIREBASE_PROJECT_ID = ""
        mock_config.MAX_MATCH_RESULTS = 3
        mock_config.NEAR_ME_RADIUS_KM = 50
        mock_config.DEFAULT_SEARCH_RADIUS_KM = 5

        with pytest.raises(ValueError, match="FIREBASE_PROJECT_ID"):
            validate_config()

    @patch("src.config.config")
    def test_validate_radius_positive(self, mock_config):
        mock_config.FIREBASE_PROJECT_ID = "test"
        mock_config.MAX_MATCH_RESULTS = 3
        mock_config.NEAR_ME_RADIUS_KM = 0
        mock_config.DEFAULT_SEARCH_RADIUS_KM = 5

        with pytest.raises(ValueError, match="must be positive"):
            validate_config()

    @patch("src.config.config")
    def test_llm_optional(self, mock_config):
        mock_config.FIREBASE_PROJECT_ID = "test"
        mock_config.MAX_MATCH_RESULTS = 3
        mock_config.NEAR_ME_RADIUS_KM = 50
        mock_config.DEFAULT_SEARCH_RADIUS_KM = 5
        mock_config.PERPLEXITY_API_KEY = None
        mock_config.OPENAI_API_KEY = None

        result = validate_config()
        assert result["firebase"] == "✓ Configured"
        assert result["openai"] == "✗ Not set"
