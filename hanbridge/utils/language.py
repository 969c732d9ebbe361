"""
Language Detection - Korean/English classification by script ratio
"""

import re

# Hangul syllables, Hangul jamo, Hangul compatibility jamo
KOREAN_CHAR_PATTERN = re.compile(r"[\uAC00-\uD7AF\u1100-\u11FF\u3130-\u318F]")
WHITESPACE_PATTERN = re.compile(r"\s")

KOREAN_RATIO_THRESHOLD = 0.3

SUPPORTED_LANGUAGES = ("ko", "en")


def detect_language(text: str) -> str:
    """
    Classify text as Korean or English.

    Returns "ko" when the share of Hangul characters among non-whitespace
    characters is strictly greater than 0.3, otherwise "en".

    Example:
        detect_language("안녕하세요")   # "ko"
        detect_language("Hello")        # "en"
        detect_language("   ")          # "en"
    """
    total_chars = len(WHITESPACE_PATTERN.sub("", text or ""))
    if total_chars == 0:
        return "en"

    korean_chars = len(KOREAN_CHAR_PATTERN.findall(text))
    return "ko" if korean_chars / total_chars > KOREAN_RATIO_THRESHOLD else "en"


def opposite_language(language: str) -> str:
    """ko <-> en"""
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")
    return "en" if language == "ko" else "ko"


def normalize_language_code(code: str) -> str:
    """Regional variants collapse to the two-letter code: "EN-US" -> "en" """
    return code.split("-")[0].lower()
