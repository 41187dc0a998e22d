# socialhub/services/media_service.py
import io
import logging
from dataclasses import dataclass
from typing import Optional

import cloudinary.uploader
import cloudinary.utils
from flask import Flask

from socialhub.core.errors import MediaUploadError

RESOURCE_KINDS = ("image", "video")

# 동영상 썸네일 변환 규칙: 400x400 fill-crop 프레임 추출
THUMBNAIL_TRANSFORMATION = [{"width": 400, "height": 400, "crop": "fill"}]


@dataclass
class UploadResult:
    url: str
    storage_id: str


class MediaService:
    """
    Cloudinary 미디어 업로드를 담당하는 서비스 클래스입니다.
    게시물 이미지/동영상 업로드, 동영상 썸네일 URL 생성, 삭제 기능을 제공합니다.
    """

    def __init__(self, cloud_name: Optional[str] = None, api_key: Optional[str] = None, api_secret: Optional[str] = None):
        """
        자격 증명은 생성자 또는 init_app을 통해 주입됩니다.
        썸네일 URL 생성은 cloud_name만 있으면 동작합니다.
        """
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Cloudinary 계정을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        cloud_name = app.config.get('CLOUDINARY_CLOUD_NAME')
        if not cloud_name:
            raise ValueError("CLOUDINARY_CLOUD_NAME 설정이 .env 또는 설정 파일에 필요합니다.")

        self.cloud_name = cloud_name
        self.api_key = app.config.get('CLOUDINARY_API_KEY')
        self.api_secret = app.config.get('CLOUDINARY_API_SECRET')
        logging.info("MediaService: Cloudinary 서비스가 성공적으로 초기화되었습니다.")

    def _credentials(self) -> dict:
        if not self.cloud_name:
            raise RuntimeError("MediaService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        return {"cloud_name": self.cloud_name, "api_key": self.api_key, "api_secret": self.api_secret}

    def upload(self, buffer: bytes, resource_kind: str, folder: str) -> UploadResult:
        """
        메모리상의 파일 데이터를 Cloudinary에 업로드합니다.

        :param buffer: 업로드할 파일의 바이트 데이터
        :param resource_kind: "image" 또는 "video"
        :param folder: 업로드 대상 폴더
        :return: 영구 URL(secure_url)과 저장소 식별자(public_id)
        :raises MediaUploadError: 업로드 실패 시
        """
        if resource_kind not in RESOURCE_KINDS:
            raise ValueError(f"'{resource_kind}'은(는) 유효한 리소스 타입이 아닙니다.")

        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(buffer),
                resource_type=resource_kind,
                folder=folder,
                **self._credentials()
            )
        except Exception as e:
            logging.error(f"미디어 업로드 실패 (resource_type: {resource_kind}): {e}", exc_info=True)
            raise MediaUploadError(f"미디어 업로드에 실패했습니다: {e}") from e

        logging.info(f"미디어 업로드 성공 (public_id: {result.get('public_id')})")
        return UploadResult(url=result["secure_url"], storage_id=result["public_id"])

    def video_thumbnail_url(self, storage_id: str) -> str:
        """
        업로드된 동영상의 썸네일 URL을 만듭니다.
        별도 업로드 없이 같은 public_id에 jpg 포맷과 400x400 fill 변환을 지정한 URL입니다.
        """
        url, _ = cloudinary.utils.cloudinary_url(
            storage_id,
            resource_type="video",
            format="jpg",
            transformation=THUMBNAIL_TRANSFORMATION,
            secure=True,
            cloud_name=self._credentials()["cloud_name"]
        )
        return url

    def destroy(self, storage_id: str, resource_kind: str) -> None:
        """업로드된 미디어를 삭제합니다. 실패는 로그만 남깁니다."""
        try:
            cloudinary.uploader.destroy(storage_id, resource_type=resource_kind, **self._credentials())
        except Exception as e:
            logging.error(f"미디어 삭제 실패 (public_id: {storage_id}): {e}", exc_info=True)
