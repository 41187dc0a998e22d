# socialhub/api/posts/schemas.py
from marshmallow import Schema, fields, validate

from socialhub.api.comments.schemas import CommentResponseSchema
from socialhub.models.post import PostType

# --- API 요청/응답 스키마 ---

class PostCreateSchema(Schema):
    """
    POST /api/posts (multipart/form-data) 폼 필드의 유효성을 검사합니다.
    미디어 파일은 'media' 파일 필드로 별도 전달됩니다.
    """
    type = fields.Str(
        required=True,
        validate=validate.OneOf([t.value for t in PostType]),
        error_messages={"required": "게시물 타입(type)은 필수 항목입니다."}
    )
    # 길이 검사는 공백 제거 후 서비스에서 수행합니다.
    title = fields.Str()
    caption = fields.Str()
    tags = fields.Str()  # 쉼표로 구분된 태그 문자열

class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(dump_only=True)
    user_id = fields.Str(required=True)
    type = fields.Str(required=True)
    title = fields.Str(allow_none=True)
    caption = fields.Str(allow_none=True)
    media_url = fields.Str(allow_none=True)
    media_public_id = fields.Str(allow_none=True)
    thumbnail_url = fields.Str(allow_none=True)
    tags = fields.List(fields.Str())
    comment_ids = fields.List(fields.Str())
    likes = fields.List(fields.Str())
    dislikes = fields.List(fields.Str())
    like_count = fields.Function(lambda post: len(post.get('likes') or []))
    dislike_count = fields.Function(lambda post: len(post.get('dislikes') or []))
    views = fields.Int()
    is_published = fields.Bool()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    # 상세 조회 시 서비스 로직에서 채워주는 응답 전용 필드
    comments = fields.List(fields.Nested(CommentResponseSchema), dump_only=True)

class ReactionResponseSchema(Schema):
    """좋아요/싫어요 토글 결과 응답."""
    action = fields.Str(required=True)
    like_count = fields.Int(required=True)
    dislike_count = fields.Int(required=True)
    post = fields.Nested(PostResponseSchema)
