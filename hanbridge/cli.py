"""
hanbridge CLI - 번역 파이프라인 실행 스크립트

사용법:
    hanbridge translate "안녕하세요"
    hanbridge translate "오늘 날씨 좋네요" --profile parent-talk --rule "Keep it short"
    hanbridge translate "첫 문장" "Second sentence"            # 배치
    hanbridge variation "안녕하세요" "Hello" --profile natural
    hanbridge alternatives "nice" --context "The weather is nice" --source en --target ko
    hanbridge revalidate "안녕하세요" "Hi there"
    hanbridge profiles
    hanbridge health

환경 변수:
    HANBRIDGE_PROVIDER     deepl | bedrock
    DEEPL_API_KEY          DeepL 인증 키
    AWS_REGION             Bedrock 리전
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from hanbridge.assistant import TranslationAssistant
from hanbridge.errors import HanbridgeError
from hanbridge.models import TranslationRequest

logger = logging.getLogger(__name__)


# =============================================================================
# 설정
# =============================================================================
def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # 불필요한 로그 억제
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("strands").setLevel(logging.WARNING)
    logging.getLogger("deepl").setLevel(logging.WARNING)


# =============================================================================
# 유틸리티 함수
# =============================================================================
def print_json_block(title: str, data: Any) -> None:
    """JSON 블록 출력"""
    print(f"\n{'='*60}")
    print(title)
    print("="*60)
    print(json.dumps(data, ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hanbridge",
        description="Korean↔English translation with back-translation accuracy check"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("translate", help="텍스트 번역")
    p.add_argument("texts", nargs="+", help="번역할 텍스트 (여러 개면 배치)")
    p.add_argument("--profile", default="natural", help="프로파일 ID (기본: natural)")
    p.add_argument("--rule", action="append", default=[], dest="rules", help="추가 규칙 (반복 가능)")
    p.add_argument("--concurrency", type=int, default=5, help="배치 동시성 (기본: 5)")

    p = sub.add_parser("variation", help="번역 변형 생성")
    p.add_argument("original")
    p.add_argument("current")
    p.add_argument("--profile", default="natural")
    p.add_argument("--rule", action="append", default=[], dest="rules")

    p = sub.add_parser("alternatives", help="대체 표현 조회")
    p.add_argument("word")
    p.add_argument("--context", default="")
    p.add_argument("--source", default="en")
    p.add_argument("--target", default="ko")

    p = sub.add_parser("revalidate", help="편집된 번역 재검증")
    p.add_argument("original")
    p.add_argument("translation")
    p.add_argument("--profile", default="natural")

    sub.add_parser("profiles", help="프로파일 목록")
    sub.add_parser("health", help="상태 확인")

    return parser


# =============================================================================
# 실행
# =============================================================================
async def run_command(assistant: TranslationAssistant, args: argparse.Namespace) -> int:
    if args.command == "translate":
        if len(args.texts) == 1:
            result = await assistant.translate(args.texts[0], args.profile, args.rules)
            print_json_block("번역 결과", result.to_dict())
            return 0

        requests = [
            TranslationRequest(text=text, profile_id=args.profile, custom_rules=args.rules)
            for text in args.texts
        ]
        results = await assistant.graph.run_batch(requests, concurrency=args.concurrency)
        exit_code = 0
        for text, result in zip(args.texts, results):
            if isinstance(result, Exception):
                logger.error(f"번역 실패 ({text[:30]}): {result}")
                exit_code = 1
            else:
                print_json_block(text[:60], result.to_dict())
        return exit_code

    if args.command == "variation":
        result = await assistant.generate_variation(args.original, args.current, args.profile, args.rules)
        print_json_block("변형 결과", result.model_dump())
        return 0

    if args.command == "alternatives":
        alternatives = await assistant.get_alternatives(args.word, args.context, args.source, args.target)
        print_json_block("대체 표현", [a.model_dump() for a in alternatives])
        return 0

    if args.command == "revalidate":
        result = await assistant.revalidate(args.original, args.translation, args.profile)
        print_json_block("재검증 결과", result.to_dict())
        return 0

    if args.command == "profiles":
        print_json_block("프로파일", [p.to_dict() for p in assistant.list_profiles()])
        return 0

    print_json_block("상태", assistant.health())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        assistant = TranslationAssistant.from_settings()
        return asyncio.run(run_command(assistant, args))
    except HanbridgeError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except ValueError as e:
        logger.error(f"설정 오류: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
