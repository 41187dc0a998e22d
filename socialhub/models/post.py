# socialhub/models/post.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from socialhub.utils.datetime_utils import DateTimeUtils

TITLE_MAX_LENGTH = 150
CAPTION_MAX_LENGTH = 2000

class PostType(Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"

class Reaction(Enum):
    LIKE = "like"
    DISLIKE = "dislike"

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    좋아요/싫어요/댓글은 사용자·댓글 ID 참조로만 보관합니다.
    """
    post_id: str
    user_id: str
    type: PostType
    title: Optional[str] = None
    caption: Optional[str] = None
    media_url: Optional[str] = None
    media_public_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    comment_ids: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    dislikes: List[str] = field(default_factory=list)
    views: int = 0
    is_published: bool = True
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def __post_init__(self):
        if self.type == PostType.TEXT:
            # 텍스트 게시물은 미디어 관련 필드를 갖지 않습니다.
            self.media_url = None
            self.media_public_id = None
            self.thumbnail_url = None
        elif not self.media_url:
            raise ValueError(f"'{self.type.value}' 게시물에는 media_url이 필요합니다.")
        elif self.type == PostType.VIDEO and not self.thumbnail_url:
            raise ValueError("동영상 게시물에는 thumbnail_url이 필요합니다.")

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리. Enum은 문자열 값으로 저장합니다."""
        return DateTimeUtils.for_firestore(asdict(self))


@dataclass
class ReactionResult:
    """좋아요/싫어요 토글 결과."""
    likes: List[str]
    dislikes: List[str]
    action: str  # "added" | "removed"

    @property
    def like_count(self) -> int:
        return len(self.likes)

    @property
    def dislike_count(self) -> int:
        return len(self.dislikes)


def apply_reaction(likes: List[str], dislikes: List[str], user_id: str, reaction: Reaction) -> ReactionResult:
    """
    한 사용자의 반응 상태를 전이시킵니다.

    1. 반대편 집합에서 사용자를 무조건 제거합니다. (좋아요/싫어요 상호 배타)
    2. 대상 집합에 이미 있으면 제거(토글 해제), 없으면 추가합니다.

    입력 리스트는 변경하지 않고 새 리스트를 반환합니다.
    """
    if reaction == Reaction.LIKE:
        target, opposite = list(likes), list(dislikes)
    else:
        target, opposite = list(dislikes), list(likes)

    opposite = [uid for uid in opposite if uid != user_id]
    if user_id in target:
        target = [uid for uid in target if uid != user_id]
        action = "removed"
    else:
        target.append(user_id)
        action = "added"

    if reaction == Reaction.LIKE:
        return ReactionResult(likes=target, dislikes=opposite, action=action)
    return ReactionResult(likes=opposite, dislikes=target, action=action)
