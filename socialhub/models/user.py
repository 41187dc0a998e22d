# socialhub/models/user.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any

from socialhub.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    팔로워/팔로잉/저장한 게시물은 모두 ID 목록으로 관리합니다.
    """
    user_id: str
    username: str
    email: str
    password_hash: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    followers: List[str] = field(default_factory=list)
    following: List[str] = field(default_factory=list)
    saved_posts: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))


def to_author(user_data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """댓글/게시물 응답에 포함될 최소한의 작성자 정보만 추려냅니다."""
    if not user_data:
        return None
    return {
        "user_id": user_data.get("user_id"),
        "username": user_data.get("username"),
        "avatar_url": user_data.get("avatar_url"),
    }


def to_public_profile(user_data: Dict[str, Any]) -> Dict[str, Any]:
    """다른 사용자에게 공개되는 프로필. 이메일과 비밀번호 해시는 제외합니다."""
    followers = user_data.get("followers") or []
    following = user_data.get("following") or []
    return {
        "user_id": user_data.get("user_id"),
        "username": user_data.get("username"),
        "bio": user_data.get("bio"),
        "avatar_url": user_data.get("avatar_url"),
        "followers": list(followers),
        "following": list(following),
        "follower_count": len(followers),
        "following_count": len(following),
    }


def to_self_profile(user_data: Dict[str, Any]) -> Dict[str, Any]:
    """본인 프로필. 비밀번호 해시를 제외한 모든 필드를 포함합니다."""
    profile = to_public_profile(user_data)
    profile["email"] = user_data.get("email")
    profile["saved_posts"] = list(user_data.get("saved_posts") or [])
    profile["created_at"] = user_data.get("created_at")
    profile["updated_at"] = user_data.get("updated_at")
    return profile
