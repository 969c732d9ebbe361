"""
Similarity Scorer - 토큰 겹침 기반 의미 보존 추정

생성형 모델 없이 원문과 역번역을 비교하는 결정적 폴백 지표.
Jaccard 유사도(70%)와 길이 비율(30%)의 가중 평균을 0~100 점수로 반환합니다.
"""

import math
import re
from typing import List

from hanbridge.models import AccuracyScore

# ASCII 단어 문자, 공백, 한글 음절 외 모두 제거
_STRIP_PATTERN = re.compile(r"[^A-Za-z0-9_\s가-힣]")

JACCARD_WEIGHT = 0.7
LENGTH_WEIGHT = 0.3

# (최소 점수, 설명) - 높은 점수부터
SCORE_BANDS = [
    (85, "Excellent semantic preservation"),
    (70, "Good meaning retention with minor variations"),
    (50, "Moderate similarity - some nuances may differ"),
]
LOW_BAND_EXPLANATION = "Translation may have significant interpretation"
EMPTY_EXPLANATION = "Unable to compare texts"


def _normalize(text: str) -> str:
    return _STRIP_PATTERN.sub("", text.lower()).strip()


def tokenize(text: str) -> List[str]:
    """소문자화 후 공백 기준 분할 (빈 토큰 제외)"""
    return [t for t in _normalize(text).split() if t]


def explain_score(score: int) -> str:
    """점수 구간별 설명"""
    for threshold, explanation in SCORE_BANDS:
        if score >= threshold:
            return explanation
    return LOW_BAND_EXPLANATION


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_text_similarity(original: str, candidate: str) -> AccuracyScore:
    """
    원문과 후보 텍스트의 유사도 점수 계산.

    Args:
        original: 원문 (사용자 입력)
        candidate: 비교 대상 (보통 역번역)

    Returns:
        AccuracyScore: 0~100 점수와 설명

    Example:
        calculate_text_similarity("apple banana", "car train")
        # score=30, "Translation may have significant interpretation"
    """
    original_tokens = tokenize(original)
    candidate_tokens = tokenize(candidate)

    if not original_tokens or not candidate_tokens:
        return AccuracyScore(score=0, explanation=EMPTY_EXPLANATION)

    original_set = set(original_tokens)
    candidate_set = set(candidate_tokens)

    match_count = sum(1 for token in original_set if token in candidate_set)
    union_size = len(original_set | candidate_set)
    jaccard = match_count / union_size * 100

    length_ratio = (
        min(len(original_tokens), len(candidate_tokens))
        / max(len(original_tokens), len(candidate_tokens))
    )

    combined = _round_half_up(jaccard * JACCARD_WEIGHT + length_ratio * 100 * LENGTH_WEIGHT)
    score = min(100, max(0, combined))

    return AccuracyScore(score=score, explanation=explain_score(score))


class SimilarityScorer:
    """Scorer interface used by the pipeline for the deterministic path"""

    def score(self, original: str, candidate: str) -> AccuracyScore:
        return calculate_text_similarity(original, candidate)
