# socialhub/api/users/services.py
import logging
import uuid
from typing import Optional, Dict, Any, List

from werkzeug.security import generate_password_hash

from socialhub.core.errors import InvalidInputError, NotFoundError
from socialhub.core.security import Identity, require_identity
from socialhub.models.user import User, to_public_profile, to_self_profile
from socialhub.services.firestore_service import FirestoreStore, USERS, POSTS
from socialhub.utils.datetime_utils import DateTimeUtils

PROFILE_FIELDS = ('username', 'email', 'bio', 'avatar_url')


class UserService:
    """
    사용자 프로필, 팔로우 관계, 저장한 게시물을 관리하는 서비스.
    """
    def __init__(self, store: FirestoreStore):
        self.store = store
        logging.info("UserService initialized with dependencies.")

    # --- 프로필 ---
    def create_user(self, username: str, email: str, password: Optional[str] = None) -> Dict[str, Any]:
        """사용자 문서를 생성합니다. 같은 이메일의 사용자가 있으면 InvalidInputError."""
        if not username or not email:
            raise InvalidInputError("username과 email은 필수 항목입니다.")
        if self.store.query(USERS, filters=[('email', '==', email)], limit=1):
            raise InvalidInputError("이미 사용 중인 이메일입니다.")

        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=generate_password_hash(password) if password else None
        )
        self.store.set(USERS, user.user_id, user.to_dict())
        logging.info(f"사용자 생성 완료 (user_id: {user.user_id})")
        return to_self_profile(user.to_dict())

    def _get_user_doc(self, user_id: str) -> Dict[str, Any]:
        user = self.store.get(USERS, user_id)
        if not user:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        return user

    def get_profile(self, identity: Identity) -> Dict[str, Any]:
        """본인 프로필을 조회합니다. (비밀번호 해시 제외)"""
        identity = require_identity(identity)
        return to_self_profile(self._get_user_doc(identity.user_id))

    def get_user(self, user_id: str) -> Dict[str, Any]:
        """다른 사용자의 공개 프로필을 조회합니다."""
        return to_public_profile(self._get_user_doc(user_id))

    def update_profile(self, identity: Identity, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        프로필을 수정합니다. 전달된 필드만 변경되며, 비밀번호는 해시하여 저장합니다.

        :param changes: username, email, password, bio, avatar_url 중 변경할 값
        """
        identity = require_identity(identity)
        fields = {key: changes[key] for key in PROFILE_FIELDS if changes.get(key) is not None}
        if fields.get('email'):
            owners = self.store.query(USERS, filters=[('email', '==', fields['email'])], limit=1)
            if owners and owners[0].get('user_id') != identity.user_id:
                raise InvalidInputError("이미 사용 중인 이메일입니다.")
        if changes.get('password'):
            fields['password_hash'] = generate_password_hash(changes['password'])
        fields['updated_at'] = DateTimeUtils.now()

        updated = self.store.update(USERS, identity.user_id, fields)
        if updated is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        logging.info(f"프로필 수정 완료 (user_id: {identity.user_id}, fields: {sorted(fields)})")
        return to_self_profile(updated)

    # --- 팔로우 ---
    def _change_follow(self, identity: Identity, target_user_id: Optional[str], follow: bool) -> Dict[str, Any]:
        """
        두 사용자의 followers/following을 하나의 트랜잭션에서 함께 갱신합니다.
        대상/본인 사용자의 존재 여부는 쓰기 전에 확인합니다.
        """
        identity = require_identity(identity)
        if not target_user_id:
            raise InvalidInputError("대상 사용자 ID(user_id)는 필수 항목입니다.")
        if follow and target_user_id == identity.user_id:
            raise InvalidInputError("자기 자신을 팔로우할 수 없습니다.")

        def _apply(tx):
            target = tx.get(USERS, target_user_id)
            if target is None:
                raise NotFoundError("대상 사용자를 찾을 수 없습니다.")
            current = tx.get(USERS, identity.user_id)
            if current is None:
                raise NotFoundError("사용자를 찾을 수 없습니다.")

            followers = [uid for uid in (target.get('followers') or []) if uid != identity.user_id]
            following = [uid for uid in (current.get('following') or []) if uid != target_user_id]
            if follow:
                followers.append(identity.user_id)
                following.append(target_user_id)

            now = DateTimeUtils.now()
            if target_user_id == identity.user_id:
                # 자기 자신 언팔로우: 같은 문서이므로 한 번에 갱신합니다.
                fields = {'followers': followers, 'following': following, 'updated_at': now}
                tx.update(USERS, identity.user_id, fields)
                target.update(fields)
                current.update(fields)
                return target, current

            tx.update(USERS, target_user_id, {'followers': followers, 'updated_at': now})
            tx.update(USERS, identity.user_id, {'following': following, 'updated_at': now})
            target.update(followers=followers, updated_at=now)
            current.update(following=following, updated_at=now)
            return target, current

        target, current = self.store.run_transaction(_apply)
        logging.info(f"{'follow' if follow else 'unfollow'}: {identity.user_id} -> {target_user_id}")
        return {"user": to_public_profile(target), "current_user": to_self_profile(current)}

    def follow(self, identity: Identity, target_user_id: Optional[str]) -> Dict[str, Any]:
        return self._change_follow(identity, target_user_id, follow=True)

    def unfollow(self, identity: Identity, target_user_id: Optional[str]) -> Dict[str, Any]:
        return self._change_follow(identity, target_user_id, follow=False)

    # --- 저장한 게시물 ---
    def _with_saved_posts(self, user: Dict[str, Any]) -> Dict[str, Any]:
        profile = to_self_profile(user)
        profile['saved_posts'] = self.store.get_many(POSTS, user.get('saved_posts') or [])
        return profile

    def save_post(self, identity: Identity, post_id: str) -> Dict[str, Any]:
        """
        게시물을 저장 목록에 추가합니다. 이미 저장된 게시물이면 변화가 없습니다.
        게시물 존재 여부는 확인하지 않으며, 없는 게시물은 조회 시 제외됩니다.
        """
        identity = require_identity(identity)
        updated = self.store.array_union(USERS, identity.user_id, 'saved_posts', [post_id])
        if updated is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        return self._with_saved_posts(updated)

    def unsave_post(self, identity: Identity, post_id: str) -> Dict[str, Any]:
        """게시물을 저장 목록에서 제거합니다. 저장되지 않은 게시물이어도 성공합니다."""
        identity = require_identity(identity)
        updated = self.store.array_remove(USERS, identity.user_id, 'saved_posts', [post_id])
        if updated is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.")
        return self._with_saved_posts(updated)

    def get_saved_posts(self, identity: Identity) -> List[Dict[str, Any]]:
        identity = require_identity(identity)
        user = self._get_user_doc(identity.user_id)
        return self.store.get_many(POSTS, user.get('saved_posts') or [])
