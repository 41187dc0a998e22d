# socialhub/core/security.py
from dataclasses import dataclass
from typing import Optional

from flask_jwt_extended import get_jwt_identity

from socialhub.core.errors import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """
    인증 계층에서 한 번만 해석되어 모든 서비스 호출에 값으로 전달되는 사용자 신원.
    """
    user_id: str


def _normalize(raw) -> Optional[str]:
    # 토큰 발급처에 따라 identity가 문자열 또는 {'id': ...} / {'user_id': ...} 형태로 들어옵니다.
    if isinstance(raw, dict):
        raw = raw.get('user_id') or raw.get('id') or raw.get('_id')
    if raw is None:
        return None
    user_id = str(raw).strip()
    return user_id or None


def current_identity() -> Identity:
    """
    현재 요청의 JWT에서 Identity를 만듭니다.
    jwt_required()로 보호된 라우트 안에서만 호출해야 합니다.

    :raises UnauthorizedError: 토큰에 사용자 식별자가 없는 경우
    """
    user_id = _normalize(get_jwt_identity())
    if not user_id:
        raise UnauthorizedError("인증된 사용자 정보를 확인할 수 없습니다.")
    return Identity(user_id=user_id)


def require_identity(identity: Optional[Identity]) -> Identity:
    """서비스 진입 시 Identity가 비어 있으면 UnauthorizedError를 발생시킵니다."""
    if identity is None or not identity.user_id:
        raise UnauthorizedError("인증된 사용자 정보를 확인할 수 없습니다.")
    return identity
