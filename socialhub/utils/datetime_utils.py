# socialhub/utils/datetime_utils.py
"""
일관된 시간 처리를 위한 유틸리티 모듈

- 모든 시간은 UTC timezone-aware datetime으로 통일합니다.
- Firestore 저장 전 변환 규칙을 한 곳에서 관리합니다.
"""

from datetime import datetime, date, timezone, time
from enum import Enum
from typing import Any


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체를 변환

        변환 규칙:
        - Enum -> value
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.for_firestore(value) for key, value in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

