# socialhub/api/users/routes.py
import logging
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from socialhub.api.posts.schemas import PostResponseSchema
from socialhub.api.users.schemas import (
    UserPublicResponseSchema, UserSelfResponseSchema, ProfileUpdateSchema, FollowSchema
)
from socialhub.core.errors import ServiceError
from socialhub.core.responses import success_response, error_response, validation_error_response, server_error_response
from socialhub.core.security import current_identity

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필을 조회합니다."""
    user_service = current_app.services['users']
    try:
        profile = user_service.get_profile(current_identity())
        return success_response("사용자를 조회했습니다.", user=UserSelfResponseSchema().dump(profile))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"프로필 조회 중 오류 발생: {e}", exc_info=True)
        return server_error_response("프로필 조회 중 오류가 발생했습니다.", e, "PROFILE_FETCH_FAILED")

@users_bp.route('/me', methods=['PATCH'])
@jwt_required()
def update_my_profile():
    """
    현재 로그인된 사용자의 프로필을 수정합니다.
    전달된 필드만 변경되며, password가 있으면 해시하여 저장합니다.
    """
    user_service = current_app.services['users']
    try:
        identity = current_identity()
        changes = ProfileUpdateSchema().load(request.get_json(silent=True) or {})
        profile = user_service.update_profile(identity, changes)
        return success_response("프로필이 수정되었습니다.", user=UserSelfResponseSchema().dump(profile))
    except ValidationError as err:
        return validation_error_response(err.messages)
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"프로필 수정 중 오류 발생: {e}", exc_info=True)
        return server_error_response("프로필 수정 중 서버 오류가 발생했습니다.", e)

@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    user_service = current_app.services['users']
    try:
        profile = user_service.get_user(user_id)
        return success_response("사용자를 조회했습니다.", user=UserPublicResponseSchema().dump(profile))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return server_error_response("프로필 조회 중 오류가 발생했습니다.", e, "PROFILE_FETCH_FAILED")

@users_bp.route('/<string:user_id>/posts', methods=['GET'])
@jwt_required(optional=True)
def get_user_posts(user_id: str):
    """특정 사용자가 작성한 게시물 목록을 최신순으로 조회합니다."""
    post_service = current_app.services['posts']
    try:
        posts = post_service.get_posts_by_user(user_id)
        return success_response("게시물 목록을 조회했습니다.", posts=PostResponseSchema(many=True).dump(posts))
    except Exception as e:
        logging.error(f"사용자 게시물 목록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return server_error_response("게시물 목록 조회 중 오류가 발생했습니다.", e)


def _follow_action(follow: bool):
    user_service = current_app.services['users']
    try:
        identity = current_identity()
        data = FollowSchema().load(request.get_json(silent=True) or {})
        if follow:
            result = user_service.follow(identity, data['user_id'])
        else:
            result = user_service.unfollow(identity, data['user_id'])
        return success_response(
            "팔로우했습니다." if follow else "언팔로우했습니다.",
            user=UserPublicResponseSchema().dump(result['user']),
            current_user=UserSelfResponseSchema().dump(result['current_user'])
        )
    except ValidationError as err:
        return validation_error_response(err.messages)
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"{'팔로우' if follow else '언팔로우'} 처리 중 오류 발생: {e}", exc_info=True)
        return server_error_response("팔로우 처리 중 서버 오류가 발생했습니다.", e)

@users_bp.route('/follow', methods=['POST'])
@jwt_required()
def follow_user():
    """요청 본문의 user_id 사용자를 팔로우합니다."""
    return _follow_action(follow=True)

@users_bp.route('/unfollow', methods=['POST'])
@jwt_required()
def unfollow_user():
    """요청 본문의 user_id 사용자를 언팔로우합니다."""
    return _follow_action(follow=False)

@users_bp.route('/me/saved-posts', methods=['GET'])
@jwt_required()
def get_saved_posts():
    """저장한 게시물 목록을 조회합니다."""
    user_service = current_app.services['users']
    try:
        posts = user_service.get_saved_posts(current_identity())
        return success_response("저장한 게시물을 조회했습니다.", posts=PostResponseSchema(many=True).dump(posts))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"저장한 게시물 조회 중 오류 발생: {e}", exc_info=True)
        return server_error_response("저장한 게시물 조회 중 오류가 발생했습니다.", e)

@users_bp.route('/me/saved-posts/<string:post_id>', methods=['POST'])
@jwt_required()
def save_post(post_id: str):
    """게시물을 저장합니다. 이미 저장된 경우에도 성공으로 처리합니다."""
    user_service = current_app.services['users']
    try:
        profile = user_service.save_post(current_identity(), post_id)
        return success_response("게시물을 저장했습니다.", user=UserSelfResponseSchema().dump(profile))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"게시물 저장 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("게시물 저장 중 오류가 발생했습니다.", e)

@users_bp.route('/me/saved-posts/<string:post_id>', methods=['DELETE'])
@jwt_required()
def unsave_post(post_id: str):
    """게시물 저장을 취소합니다. 저장되지 않은 게시물이어도 성공으로 처리합니다."""
    user_service = current_app.services['users']
    try:
        profile = user_service.unsave_post(current_identity(), post_id)
        return success_response("게시물 저장을 취소했습니다.", user=UserSelfResponseSchema().dump(profile))
    except ServiceError as e:
        return error_response(e)
    except Exception as e:
        logging.error(f"게시물 저장 취소 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return server_error_response("게시물 저장 취소 중 오류가 발생했습니다.", e)
