# socialhub/api/comments/schemas.py
from marshmallow import Schema, fields, validate

from socialhub.models.comment import COMMENT_MAX_LENGTH

class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    PATCH /api/comments/{comment_id}
    댓글 작성/수정 요청의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    content = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=COMMENT_MAX_LENGTH, error=f"댓글은 1~{COMMENT_MAX_LENGTH}자 사이여야 합니다."),
        error_messages={"required": "댓글 내용(content)은 필수 항목입니다."}
    )

class CommentResponseSchema(Schema):
    """댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    user_id = fields.Str(allow_none=True)
    content = fields.Str(required=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
