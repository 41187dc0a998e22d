# socialhub/api/comments/routes.py
import logging
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from socialhub.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from socialhub.api.users.schemas import AuthorSchema
from socialhub.core.errors import ServiceError
from socialhub.core.responses import success_response, error_response, validation_error_response, server_error_response
from socialhub.core.security import current_identity


comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('/posts/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    """
    특정 게시글에 새로운 댓글을 작성합니다.
    - 성공 시, 생성된 댓글과 작성자 요약 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    comment_service = current_app.services['comments']
    try:
        identity = current_identity()
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        result = comment_service.create_comment(post_id, identity, data['content'])
        author = AuthorSchema().dump(result['user']) if result['user'] else None
        return success_response(
            "댓글이 작성되었습니다.", 201,
            comment=CommentResponseSchema().dump(result['comment']),
            user=author
        )
    except ValidationError as err:
        return validation_error_response(err.messages)
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"댓글 생성 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("댓글 생성 중 오류가 발생했습니다.", e, "COMMENT_CREATION_FAILED")

@comments_bp.route('/comments/<string:comment_id>', methods=['PATCH'])
@jwt_required()
def update_comment(comment_id: str):
    """특정 댓글의 내용을 수정합니다. (작성자 본인만 가능)"""
    comment_service = current_app.services['comments']
    try:
        identity = current_identity()
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        updated = comment_service.update_comment(comment_id, identity, data['content'])
        return success_response("댓글이 수정되었습니다.", comment=CommentResponseSchema().dump(updated))
    except ValidationError as err:
        return validation_error_response(err.messages)
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"댓글 수정 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return server_error_response("댓글 수정 중 오류가 발생했습니다.", e)

@comments_bp.route('/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """
    특정 댓글을 ID로 삭제합니다. (로그인 필요)
    - 게시물의 댓글 참조 목록에서도 함께 제거됩니다.
    """
    comment_service = current_app.services['comments']
    try:
        comment_service.delete_comment(comment_id, current_identity())
        return success_response("댓글이 삭제되었습니다.")
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"댓글 삭제 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return server_error_response("댓글 삭제 중 오류가 발생했습니다.", e)
