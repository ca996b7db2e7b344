import asyncio
import json
import logging

from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError
from pydantic import ValidationError as PydanticValidationError

from quizdesk.core import cache_keys
from quizdesk.core.cache import CacheBackend
from quizdesk.core.config import settings
from quizdesk.exceptions import AIServiceUnavailableError
from quizdesk.schemas.ai import AIQuizDraft, AskQuestionResponse

logger = logging.getLogger(__name__)

# 모델에 전달할 원문 최대 길이
MAX_SOURCE_CHARS = 30000

FALLBACK_MESSAGE = "AI가 퀴즈를 생성하지 못했습니다. 직접 문항을 입력하거나 다른 파일로 다시 시도해주세요."

_gemini_client: genai.Client | None = None
# 동시 Gemini API 요청 수 제한 (과부하 방지)
_gemini_semaphore: asyncio.Semaphore | None = None


def get_gemini_client() -> genai.Client:
    """Gemini 클라이언트 싱글톤"""
    global _gemini_client
    if _gemini_client is None:
        if not settings.gemini_api_key:
            raise AIServiceUnavailableError("GEMINI_API_KEY가 설정되지 않았습니다")
        _gemini_client = genai.Client(api_key=settings.gemini_api_key)
    return _gemini_client


def get_gemini_semaphore() -> asyncio.Semaphore:
    """Gemini API 동시 요청 제한 Semaphore 싱글톤"""
    global _gemini_semaphore
    if _gemini_semaphore is None:
        _gemini_semaphore = asyncio.Semaphore(settings.gemini_max_concurrent)
        logger.info(f"Gemini API 동시 요청 제한 설정: 최대 {settings.gemini_max_concurrent}개")
    return _gemini_semaphore


def strip_code_fence(text: str) -> str:
    """마크다운 코드 블록 제거"""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


async def _generate(prompt: str, json_output: bool) -> str:
    """Gemini 단일 호출 (재시도 없음)"""
    client = get_gemini_client()
    semaphore = get_gemini_semaphore()

    config = types.GenerateContentConfig(
        temperature=0.7,
        response_mime_type="application/json" if json_output else "text/plain",
    )

    async with semaphore:
        try:
            # Gemini는 동기 API이므로 executor에서 실행
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: client.models.generate_content(
                    model=settings.gemini_model,
                    contents=prompt,
                    config=config,
                ),
            )
        except (ClientError, ServerError) as e:
            logger.error(
                f"Gemini API 호출 실패: status_code={getattr(e, 'code', 'unknown')}, "
                f"error_type={type(e).__name__}"
            )
            raise AIServiceUnavailableError()

    return response.text or ""


def build_quiz_prompt(source_text: str) -> str:
    return f"""당신은 교육용 퀴즈 출제 전문가입니다.

아래 학습 자료를 바탕으로 객관식 퀴즈를 만드세요.

자료:
{source_text[:MAX_SOURCE_CHARS]}

다음 JSON 형식으로만 응답하세요:
{{
  "title": "퀴즈 제목",
  "questions": [
    {{
      "question": "문제 내용",
      "options": ["선택지 1", "선택지 2", "선택지 3", "선택지 4"],
      "correct": 0,
      "explanation": "해설"
    }}
  ]
}}

요구사항:
- 문항 5~10개
- 문항마다 선택지 4개, 정답 1개
- correct는 정답 선택지의 0부터 시작하는 인덱스
- 자료에 근거한 간결한 해설"""


async def generate_quiz_draft(source_text: str) -> AIQuizDraft:
    """학습 자료 텍스트로 퀴즈 초안 생성

    응답 형식이 잘못되면 빈 초안과 안내 메시지를 반환하고,
    API 호출 자체가 실패하면 AIServiceUnavailableError를 발생시킨다.
    """
    raw = await _generate(build_quiz_prompt(source_text), json_output=True)

    try:
        draft = AIQuizDraft.model_validate(json.loads(strip_code_fence(raw)))
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning(f"AI 응답 파싱 실패: error_type={type(e).__name__}, raw={raw[:200]}")
        return AIQuizDraft(message=FALLBACK_MESSAGE)

    # 정답 인덱스가 선택지 범위를 벗어난 문항 제외
    questions = [q for q in draft.questions if q.correct < len(q.options)]
    if len(questions) != len(draft.questions):
        logger.warning(f"AI 초안에서 잘못된 문항 제외: {len(draft.questions) - len(questions)}개")
    if not questions:
        return AIQuizDraft(title=draft.title, message=FALLBACK_MESSAGE)

    logger.info(f"AI 퀴즈 초안 생성: questions={len(questions)}")
    return AIQuizDraft(title=draft.title, questions=questions)


async def ask_question(cache: CacheBackend, question: str) -> AskQuestionResponse:
    """학습 질문에 대한 AI 답변 (동일 질문은 캐시)"""
    cache_key = cache_keys.ai_answer(question)
    cached = await cache.get(cache_key)
    if cached is not None:
        return AskQuestionResponse(answer=cached, cached=True)

    prompt = (
        "당신은 학생의 학습 질문에 답하는 친절한 튜터입니다. "
        "핵심 개념 위주로 간결하고 정확하게 답하세요.\n\n"
        f"질문: {question.strip()}"
    )
    answer = (await _generate(prompt, json_output=False)).strip()
    if not answer:
        raise AIServiceUnavailableError("AI 응답이 비어있습니다")

    await cache.set_with_ttl(cache_key, answer, cache_keys.AI_ANSWER_TTL)
    return AskQuestionResponse(answer=answer, cached=False)
