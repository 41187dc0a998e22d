# socialhub/api/users/schemas.py
from marshmallow import Schema, fields, validate

from socialhub.api.posts.schemas import PostResponseSchema

class AuthorSchema(Schema):
    """댓글/게시물 응답에 포함될 작성자 요약 정보 스키마."""
    user_id = fields.Str(required=True)
    username = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True)

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자의 프로필 정보를 응답할 때 사용하는 스키마.
    민감한 정보(email, password_hash)는 제외합니다.
    """
    user_id = fields.Str(required=True, dump_only=True)
    username = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True)
    followers = fields.List(fields.Str())
    following = fields.List(fields.Str())
    follower_count = fields.Int()
    following_count = fields.Int()

class UserSelfResponseSchema(UserPublicResponseSchema):
    """본인 프로필 응답 스키마. saved_posts는 ID 목록 또는 게시물 객체 목록일 수 있습니다."""
    email = fields.Str(allow_none=True)
    saved_posts = fields.Method("dump_saved_posts")
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)

    def dump_saved_posts(self, user):
        saved = user.get("saved_posts") or []
        if saved and isinstance(saved[0], dict):
            return PostResponseSchema(many=True).dump(saved)
        return list(saved)

class ProfileUpdateSchema(Schema):
    """PATCH /api/users/me 요청 본문의 유효성을 검사합니다. 모든 필드는 선택 사항입니다."""
    username = fields.Str(validate=validate.Length(min=1, max=50))
    email = fields.Email()
    password = fields.Str(load_only=True, validate=validate.Length(min=8, error="비밀번호는 8자 이상이어야 합니다."))
    bio = fields.Str(validate=validate.Length(max=500))
    avatar_url = fields.URL()

class FollowSchema(Schema):
    """POST /api/users/follow, /api/users/unfollow 요청 본문."""
    user_id = fields.Str(required=True, error_messages={"required": "user_id는 필수 항목입니다."})
