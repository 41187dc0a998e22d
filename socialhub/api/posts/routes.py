# socialhub/api/posts/routes.py
import logging
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from socialhub.api.posts.schemas import PostCreateSchema, PostResponseSchema, ReactionResponseSchema
from socialhub.core.errors import ServiceError
from socialhub.core.responses import success_response, error_response, validation_error_response, server_error_response
from socialhub.core.security import current_identity
from socialhub.models.post import Reaction


posts_bp = Blueprint('posts_bp', __name__)

@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다. (multipart/form-data)
    - 폼 필드: type(필수), title, caption, tags(쉼표 구분)
    - 파일 필드: media (image/video 게시물일 때 필수)
    - 성공 시, 생성된 게시글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    post_service = current_app.services['posts']
    try:
        identity = current_identity()
        data = PostCreateSchema().load(request.form.to_dict())
        media_file = request.files.get('media')
        media = media_file.read() if media_file else None

        new_post = post_service.create_post(
            identity, data['type'], media=media,
            title=data.get('title'), caption=data.get('caption'), tags=data.get('tags')
        )
        return success_response("게시물이 생성되었습니다.", 201, post=PostResponseSchema().dump(new_post))
    except ValidationError as err:
        return validation_error_response(err.messages)
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"게시글 생성 중 오류 발생: {e}", exc_info=True)
        return server_error_response("게시글 생성 중 오류가 발생했습니다.", e, "POST_CREATION_FAILED")

@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True) # 비로그인 사용자도 피드는 볼 수 있도록 허용
def get_posts():
    """게시글 피드 목록을 최신순 페이지네이션으로 조회합니다."""
    post_service = current_app.services['posts']
    limit = request.args.get('limit', current_app.config.get('POSTS_PAGE_SIZE', 10), type=int)
    cursor = request.args.get('cursor', None, type=str)
    try:
        posts, next_cursor = post_service.get_posts(limit, cursor)
        return success_response(
            "게시물 목록을 조회했습니다.",
            posts=PostResponseSchema(many=True).dump(posts),
            next_cursor=next_cursor
        )
    except Exception as e:
        logging.error(f"게시글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return server_error_response("게시물 목록 조회 중 오류가 발생했습니다.", e)

@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id: str):
    """특정 게시글을 댓글 목록과 함께 조회합니다."""
    comment_service = current_app.services['comments']
    try:
        post = comment_service.get_post_with_comments(post_id)
        return success_response("게시물을 조회했습니다.", post=PostResponseSchema().dump(post))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"게시글 조회 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("게시물 조회 중 오류가 발생했습니다.", e)

@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """특정 게시글을 삭제합니다. (작성자 본인만 가능)"""
    post_service = current_app.services['posts']
    try:
        post_service.delete_post(post_id, current_identity())
        return success_response("게시물이 삭제되었습니다.")
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"게시글 삭제 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("게시물 삭제 중 오류가 발생했습니다.", e)


def _toggle(post_id: str, reaction: Reaction):
    post_service = current_app.services['posts']
    try:
        result = post_service.toggle_reaction(post_id, current_identity(), reaction)
        label = "좋아요" if reaction == Reaction.LIKE else "싫어요"
        message = f"{label}를 눌렀습니다." if result['action'] == "added" else f"{label}를 취소했습니다."
        return success_response(message, **ReactionResponseSchema().dump(result))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"{reaction.value} 토글 실패 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("반응 처리 중 오류가 발생했습니다.", e, "REACTION_TOGGLE_FAILED")

@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(post_id: str):
    """좋아요를 누르거나 취소합니다. 싫어요 상태였다면 싫어요는 해제됩니다."""
    return _toggle(post_id, Reaction.LIKE)

@posts_bp.route('/<string:post_id>/dislike', methods=['POST'])
@jwt_required()
def toggle_dislike(post_id: str):
    """싫어요를 누르거나 취소합니다. 좋아요 상태였다면 좋아요는 해제됩니다."""
    return _toggle(post_id, Reaction.DISLIKE)
