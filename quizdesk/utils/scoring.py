import math
from typing import Iterable


def round_half_up(value: float) -> int:
    """0.5는 올림 (내장 round()의 banker's rounding 대신)"""
    return math.floor(value + 0.5)


def percent_score(correct: int, total: int) -> int:
    """정답 비율을 0-100 정수 점수로 변환 (문항 0개면 0점)"""
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100)


def average_score(scores: Iterable[int]) -> int:
    """점수 평균 (반올림, 빈 목록은 0)"""
    scores = list(scores)
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))
