"""
JSON 응답 파싱 - 생성형 모델 응답의 구조화 디코딩

모델 응답에서 JSON 블록을 추출하여 pydantic 모델로 검증합니다.
실패 시 호출 지점별 폴백 값을 반환하며 예외를 밖으로 전파하지 않습니다.
"""

import json
import logging
import re
from typing import Any, Callable, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from hanbridge.errors import ParseError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCED_JSON = re.compile(r'```json\s*([\s\S]*?)\s*```')
_BARE_OBJECT = re.compile(r'\{[\s\S]*\}')
_BARE_ARRAY = re.compile(r'\[[\s\S]*\]')


def extract_json(response_text: str, expect_array: bool = False) -> Any:
    """
    응답 텍스트에서 JSON 값 추출.

    ```json 블록을 먼저 찾고, 없으면 가장 바깥쪽 객체(또는 배열)를 찾습니다.

    Raises:
        ParseError: JSON 블록이 없거나 디코딩 실패 시
    """
    json_match = _FENCED_JSON.search(response_text or "")
    if json_match:
        json_str = json_match.group(1)
    else:
        pattern = _BARE_ARRAY if expect_array else _BARE_OBJECT
        json_match = pattern.search(response_text or "")
        json_str = json_match.group() if json_match else None

    if not json_str:
        raise ParseError("No JSON block in response")

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e


def parse_or_default(
    response_text: str,
    model: Type[T],
    default: Union[T, Callable[[], T]],
    label: Optional[str] = None
) -> T:
    """
    JSON 응답을 model로 디코딩, 실패 시 default 반환.

    Args:
        response_text: 모델 원시 응답
        model: 검증할 pydantic 모델 타입
        default: 폴백 값 또는 폴백 팩토리
        label: 로깅용 호출 지점 이름

    Example:
        score = parse_or_default(text, AccuracyScore, AccuracyScore(score=75, explanation="..."))
    """
    try:
        data = extract_json(response_text)
        return model.model_validate(data)
    except (ParseError, PydanticValidationError) as e:
        logger.warning(f"[{label or model.__name__}] JSON 파싱 실패, 기본값 사용: {e}")
        return default() if callable(default) else default


def parse_list_or_default(
    response_text: str,
    model: Type[T],
    default: Callable[[], list],
    key: Optional[str] = None,
    label: Optional[str] = None
) -> list:
    """
    JSON 배열(또는 key 아래 배열)을 model 리스트로 디코딩, 실패 시 default() 반환.

    빈 배열도 실패로 처리합니다.
    """
    try:
        data = extract_json(response_text, expect_array=key is None)
        if key is not None:
            if not isinstance(data, dict):
                raise ParseError(f"Expected object with '{key}'")
            data = data.get(key)
        if not isinstance(data, list) or not data:
            raise ParseError("Expected a non-empty array")
        return [model.model_validate(item) for item in data]
    except (ParseError, PydanticValidationError) as e:
        logger.warning(f"[{label or model.__name__}] JSON 배열 파싱 실패, 기본값 사용: {e}")
        return default()
