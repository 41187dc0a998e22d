# socialhub/api/comments/services.py

import logging
import uuid
from typing import Optional, Dict, Any

from socialhub.core.errors import InvalidInputError, NotFoundError, ForbiddenError
from socialhub.core.security import Identity, require_identity
from socialhub.models.comment import Comment, COMMENT_MAX_LENGTH
from socialhub.models.user import to_author
from socialhub.services.firestore_service import FirestoreStore, POSTS, COMMENTS, USERS
from socialhub.utils.datetime_utils import DateTimeUtils


class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글 본문은 'comments' 컬렉션에, 댓글 ID 목록은 게시물 문서의 comment_ids에 보관합니다.
    """
    def __init__(self, store: FirestoreStore):
        self.store = store

    def _validate_content(self, content: Optional[str]) -> str:
        content = (content or "").strip()
        if not content:
            raise InvalidInputError("댓글 내용(content)은 필수 항목입니다.")
        if len(content) > COMMENT_MAX_LENGTH:
            raise InvalidInputError(f"댓글은 최대 {COMMENT_MAX_LENGTH}자까지 입력할 수 있습니다.")
        return content

    def create_comment(self, post_id: str, identity: Identity, content: Optional[str]) -> Dict[str, Any]:
        """
        새로운 댓글을 생성하고 게시물의 댓글 참조 목록에 추가합니다.
        작성자 문서가 없더라도 댓글은 생성되며, 이 경우 응답의 user는 None입니다.
        """
        identity = require_identity(identity)
        content = self._validate_content(content)

        author = to_author(self.store.get(USERS, identity.user_id))
        if author is None:
            logging.warning(f"댓글 작성자 문서를 찾을 수 없음 (user_id: {identity.user_id})")

        new_comment = Comment(
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            user_id=identity.user_id,
            content=content
        )
        comment_dict = new_comment.to_dict()

        def _create(tx):
            post = tx.get(POSTS, post_id)
            if post is None:
                raise NotFoundError("댓글을 작성할 게시물이 존재하지 않습니다.")
            tx.set(COMMENTS, new_comment.comment_id, comment_dict)
            tx.update(POSTS, post_id, {
                'comment_ids': list(post.get('comment_ids') or []) + [new_comment.comment_id]
            })

        self.store.run_transaction(_create)
        logging.info(f"댓글 생성 완료 (comment_id: {new_comment.comment_id}, post_id: {post_id})")
        return {"comment": comment_dict, "user": author}

    def get_post_with_comments(self, post_id: str) -> Dict[str, Any]:
        """게시물과 함께 comment_ids를 실제 댓글 문서로 채워서 반환합니다. (저장 순서 유지)"""
        post = self.store.get(POSTS, post_id)
        if not post:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        post['comments'] = self.store.get_many(COMMENTS, post.get('comment_ids') or [])
        return post

    def _get_owned_comment(self, comment_id: str, identity: Identity) -> Dict[str, Any]:
        comment = self.store.get(COMMENTS, comment_id)
        if not comment:
            raise NotFoundError("댓글을 찾을 수 없습니다.")
        if not comment.get('user_id'):
            raise InvalidInputError("작성자 정보가 없는 댓글입니다.")
        if comment['user_id'] != identity.user_id:
            raise ForbiddenError("댓글을 수정할 권한이 없습니다.")
        return comment

    def update_comment(self, comment_id: str, identity: Identity, content: Optional[str]) -> Dict[str, Any]:
        """댓글 내용을 수정합니다. (작성자 본인만 가능)"""
        identity = require_identity(identity)
        self._get_owned_comment(comment_id, identity)
        content = self._validate_content(content)

        updated = self.store.update(COMMENTS, comment_id, {'content': content, 'updated_at': DateTimeUtils.now()})
        if updated is None:
            raise NotFoundError("댓글을 찾을 수 없습니다.")
        return updated

    def delete_comment(self, comment_id: str, identity: Identity) -> None:
        """
        댓글을 ID로 삭제합니다.
        댓글 문서 삭제와 게시물의 comment_ids 정리를 하나의 트랜잭션에서 처리합니다.
        """
        identity = require_identity(identity)
        comment = self.store.get(COMMENTS, comment_id)
        if not comment:
            raise NotFoundError("댓글을 찾을 수 없습니다.")
        post_id = comment.get('post_id')

        def _delete(tx):
            post = tx.get(POSTS, post_id) if post_id else None
            tx.delete(COMMENTS, comment_id)
            if post is not None:
                tx.update(POSTS, post_id, {
                    'comment_ids': [cid for cid in (post.get('comment_ids') or []) if cid != comment_id]
                })

        try:
            self.store.run_transaction(_delete)
        except Exception as e:
            logging.error(f"댓글 삭제 실패 (comment_id: {comment_id}): {e}", exc_info=True)
            raise
        logging.info(f"댓글 삭제 완료 (comment_id: {comment_id}, user_id: {identity.user_id})")
