# socialhub/api/posts/services.py
import logging
import uuid
from typing import Optional, Dict, Any, Tuple, List

from socialhub.core.errors import InvalidInputError, NotFoundError, ForbiddenError
from socialhub.core.security import Identity, require_identity
from socialhub.models.post import (
    Post, PostType, Reaction, apply_reaction,
    TITLE_MAX_LENGTH, CAPTION_MAX_LENGTH
)
from socialhub.services.firestore_service import FirestoreStore, POSTS
from socialhub.services.media_service import MediaService
from socialhub.utils.datetime_utils import DateTimeUtils
from socialhub.utils.tags import parse_tags

MAX_PAGE_SIZE = 50


def _clean_text(value: Optional[str], field_name: str, max_length: int) -> Optional[str]:
    """앞뒤 공백을 제거하고 최대 길이를 검사합니다. 빈 문자열은 None으로 취급합니다."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise InvalidInputError(f"'{field_name}'은(는) 최대 {max_length}자까지 입력할 수 있습니다.")
    return value


class PostService:
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    게시물 생성(미디어 업로드 포함), 조회, 삭제, 좋아요/싫어요 토글을 포함합니다.
    """
    def __init__(self, store: FirestoreStore, media_service: MediaService, upload_folder: str = 'posts'):
        self.store = store
        self.media_service = media_service
        self.upload_folder = upload_folder

    def create_post(self, identity: Identity, post_type: Optional[str], media: Optional[bytes] = None,
                    title: Optional[str] = None, caption: Optional[str] = None,
                    tags: Optional[str] = None) -> Dict[str, Any]:
        """
        새로운 게시글을 생성하고 Firestore에 저장합니다.
        - 텍스트가 아닌 게시물은 미디어를 먼저 업로드하고, 업로드가 실패하면 아무것도 저장하지 않습니다.
        - 동영상은 업로드된 public_id로 썸네일 URL을 함께 만듭니다.
        """
        identity = require_identity(identity)
        if not post_type:
            raise InvalidInputError("게시물 타입(type)은 필수 항목입니다.")
        try:
            kind = PostType(post_type)
        except ValueError:
            raise InvalidInputError(f"'{post_type}'은(는) 유효한 게시물 타입이 아닙니다. (text, image, video)")

        title = _clean_text(title, 'title', TITLE_MAX_LENGTH)
        caption = _clean_text(caption, 'caption', CAPTION_MAX_LENGTH)

        media_url = media_public_id = thumbnail_url = None
        if kind != PostType.TEXT:
            if not media:
                raise InvalidInputError("이미지/동영상 게시물에는 미디어 파일이 필요합니다.")

            resource_kind = "video" if kind == PostType.VIDEO else "image"
            uploaded = self.media_service.upload(media, resource_kind, self.upload_folder)
            media_url = uploaded.url
            media_public_id = uploaded.storage_id
            if kind == PostType.VIDEO:
                thumbnail_url = self.media_service.video_thumbnail_url(uploaded.storage_id)

        new_post = Post(
            post_id=str(uuid.uuid4()),
            user_id=identity.user_id,
            type=kind,
            title=title,
            caption=caption,
            media_url=media_url,
            media_public_id=media_public_id,
            thumbnail_url=thumbnail_url,
            tags=parse_tags(tags)
        )
        post_dict = self.store.set(POSTS, new_post.post_id, new_post.to_dict())
        logging.info(f"게시물 생성 완료 (post_id: {new_post.post_id}, type: {kind.value})")
        return post_dict

    def get_post(self, post_id: str) -> Dict[str, Any]:
        post = self.store.get(POSTS, post_id)
        if not post:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        return post

    def get_posts(self, limit: int, cursor: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """공개된 게시물 피드를 최신순으로 페이지네이션하여 조회합니다."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        posts = self.store.query(
            POSTS,
            filters=[('is_published', '==', True)],
            order_by='created_at', descending=True,
            limit=limit, start_after=cursor
        )
        # 마지막 페이지면 다음 커서는 없습니다.
        next_cursor = posts[-1]['post_id'] if len(posts) == limit else None
        return posts, next_cursor

    def get_posts_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.query(
            POSTS,
            filters=[('user_id', '==', user_id)],
            order_by='created_at', descending=True
        )

    def delete_post(self, post_id: str, identity: Identity) -> None:
        """게시물을 삭제합니다. (작성자 본인만 가능) 업로드된 미디어도 함께 삭제합니다."""
        identity = require_identity(identity)
        post = self.get_post(post_id)
        if post.get('user_id') != identity.user_id:
            raise ForbiddenError("게시물을 삭제할 권한이 없습니다.")

        if post.get('media_public_id'):
            resource_kind = "video" if post.get('type') == PostType.VIDEO.value else "image"
            self.media_service.destroy(post['media_public_id'], resource_kind)

        self.store.delete(POSTS, post_id)
        logging.info(f"게시물 삭제 완료 (post_id: {post_id})")

    def toggle_reaction(self, post_id: str, identity: Identity, reaction: Reaction) -> Dict[str, Any]:
        """
        게시물에 대한 사용자의 좋아요/싫어요 상태를 토글합니다.
        반대 반응 제거와 대상 반응 토글을 하나의 트랜잭션에서 처리하므로
        중간에 실패해도 두 집합이 어긋난 상태로 남지 않습니다.
        """
        identity = require_identity(identity)

        def _toggle(tx):
            post = tx.get(POSTS, post_id)
            if post is None:
                raise NotFoundError("게시물을 찾을 수 없습니다.")

            result = apply_reaction(post.get('likes') or [], post.get('dislikes') or [], identity.user_id, reaction)
            updated_at = DateTimeUtils.now()
            tx.update(POSTS, post_id, {
                'likes': result.likes,
                'dislikes': result.dislikes,
                'updated_at': updated_at
            })
            post.update(likes=result.likes, dislikes=result.dislikes, updated_at=updated_at)
            return result, post

        result, post = self.store.run_transaction(_toggle)
        logging.info(f"{reaction.value} {result.action} (post_id: {post_id}, user_id: {identity.user_id})")
        return {
            "action": result.action,
            "like_count": result.like_count,
            "dislike_count": result.dislike_count,
            "post": post
        }
