from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from quizdesk.utils.dates import as_utc


class RequestModel(BaseModel):
    """요청 스키마 기본 클래스 (프론트엔드 호환: camelCase / snake_case 모두 허용)"""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


def normalize_deadline(value):
    """빈 문자열은 None, timezone 없는 시각은 UTC로 간주"""
    if value in ("", None):
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        value = as_utc(value)
    return value
