"""Tests for API credential validation."""

import pytest

from castlog.utils.api_keys import get_validated_api_key, validate_api_key
from castlog.utils.errors import APIKeyError

TWITTER_TOKEN = "AAAAAAAAAAAAAAAAAAAAA" + "x" * 30
YOUTUBE_KEY = "AIzaSyD" + "X" * 32


class TestValidateAPIKey:
    """Tests for validate_api_key function."""

    def test_valid_twitter_token(self):
        assert validate_api_key(TWITTER_TOKEN, "twitter", "TWITTER_TOKEN") == TWITTER_TOKEN

    def test_valid_youtube_key(self):
        assert validate_api_key(YOUTUBE_KEY, "youtube", "YOUTUBE_API_KEY") == YOUTUBE_KEY

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_missing_key(self, key):
        """Test that a missing credential names the variable and where to get one."""
        with pytest.raises(APIKeyError, match="No TWITTER_TOKEN is set") as exc:
            validate_api_key(key, "twitter", "TWITTER_TOKEN")
        assert "developer.twitter.com" in str(exc.value)

    def test_key_is_stripped(self):
        result = validate_api_key("  " + YOUTUBE_KEY + "  ", "youtube", "YOUTUBE_API_KEY")
        assert result == YOUTUBE_KEY

    def test_too_short_key(self):
        with pytest.raises(APIKeyError, match="too short"):
            validate_api_key("short", "twitter", "TWITTER_TOKEN")

    @pytest.mark.parametrize("suffix", ["\n", "\r", "\0", "\t"])
    def test_control_characters(self, suffix):
        with pytest.raises(APIKeyError, match="invalid characters"):
            validate_api_key(TWITTER_TOKEN + suffix + "x", "twitter", "TWITTER_TOKEN")

    @pytest.mark.parametrize("quote", ['"', "'"])
    def test_quoted_key(self, quote):
        with pytest.raises(APIKeyError, match="should not be quoted"):
            validate_api_key(quote + YOUTUBE_KEY + quote, "youtube", "YOUTUBE_API_KEY")

    def test_youtube_key_wrong_prefix(self):
        with pytest.raises(APIKeyError, match="format appears invalid"):
            validate_api_key("X" * 39, "youtube", "YOUTUBE_API_KEY")

    def test_twitter_token_has_no_format_check(self):
        token = "Y" * 30
        assert validate_api_key(token, "twitter", "TWITTER_TOKEN") == token


class TestGetValidatedAPIKey:
    """Tests for get_validated_api_key function."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", YOUTUBE_KEY)
        assert get_validated_api_key("YOUTUBE_API_KEY", "youtube") == YOUTUBE_KEY

    def test_missing_environment(self, monkeypatch):
        monkeypatch.delenv("TWITTER_TOKEN", raising=False)
        with pytest.raises(APIKeyError, match="TWITTER_TOKEN"):
            get_validated_api_key("TWITTER_TOKEN", "twitter")
