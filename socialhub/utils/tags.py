# socialhub/utils/tags.py
from typing import List, Optional


def parse_tags(raw: Optional[str]) -> List[str]:
    """
    쉼표로 구분된 태그 문자열을 순서가 유지된 태그 리스트로 변환합니다.
    예: "a, b ,c" -> ["a", "b", "c"]
    빈 항목은 제외하며, 값이 없으면 빈 리스트를 반환합니다.
    """
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(',') if tag.strip()]
