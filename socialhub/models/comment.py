# socialhub/models/comment.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any

from socialhub.utils.datetime_utils import DateTimeUtils

COMMENT_MAX_LENGTH = 1000

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    게시물과 작성자는 ID로만 참조합니다.
    """
    comment_id: str
    post_id: str
    user_id: Optional[str]
    content: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))
