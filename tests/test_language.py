"""
Tests for script-ratio language detection.
"""
import pytest

from hanbridge.utils.language import detect_language, normalize_language_code, opposite_language


class TestDetectLanguage:
    """detect_language classification"""

    def test_hangul_only_is_korean(self):
        """Text made entirely of Hangul syllables is Korean."""
        assert detect_language("안녕하세요") == "ko"

    def test_no_hangul_is_english(self):
        """Text without Hangul is English."""
        assert detect_language("The weather is nice today") == "en"

    def test_whitespace_ignored_in_ratio(self):
        """Spaces do not dilute the ratio."""
        assert detect_language("오늘   날씨가    좋네요") == "ko"

    def test_ratio_exactly_at_threshold_is_english(self):
        """3 Hangul of 10 characters = 0.30, strict comparison gives en."""
        assert detect_language("가나다abcdefg") == "en"

    def test_ratio_just_above_threshold_is_korean(self):
        """31 Hangul of 100 characters = 0.31."""
        text = "가" * 31 + "a" * 69
        assert detect_language(text) == "ko"

    def test_every_hangul_character_counts(self):
        """All Hangul characters are counted, not just the first one."""
        assert detect_language("한국어 text") == "ko"

    def test_compatibility_jamo_counts(self):
        """ㅋㅋㅋ is Hangul compatibility jamo."""
        assert detect_language("ㅋㅋㅋ ok") == "ko"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_is_english(self, text):
        """No non-whitespace characters falls back to en."""
        assert detect_language(text) == "en"


class TestLanguageCodes:
    """opposite_language / normalize_language_code"""

    def test_opposite(self):
        assert opposite_language("ko") == "en"
        assert opposite_language("en") == "ko"

    def test_opposite_rejects_unknown(self):
        with pytest.raises(ValueError):
            opposite_language("ja")

    @pytest.mark.parametrize("code,expected", [("EN-US", "en"), ("en", "en"), ("KO", "ko")])
    def test_normalize(self, code, expected):
        """Regional variants collapse to the two-letter code."""
        assert normalize_language_code(code) == expected
