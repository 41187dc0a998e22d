# socialhub/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from socialhub.core.config import config_by_name
from socialhub.core.responses import validation_error_response

# - API 블루프린트
from socialhub.api.users.routes import users_bp
from socialhub.api.posts.routes import posts_bp
from socialhub.api.comments.routes import comments_bp

# - 서비스 모듈
from socialhub.services.firestore_service import FirestoreStore
from socialhub.services.media_service import MediaService
from socialhub.api.users.services import UserService
from socialhub.api.posts.services import PostService
from socialhub.api.comments.services import CommentService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    firebase_admin.initialize_app(credentials.Certificate(cred_path))


def create_app(config_name: Optional[str] = None,
               store: Optional[FirestoreStore] = None,
               media_service: Optional[MediaService] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param store: 문서 저장소. 주어지지 않으면 Firebase를 초기화하고 FirestoreStore를 생성합니다.
    :param media_service: 미디어 업로드 서비스. 주어지지 않으면 설정값으로 MediaService를 생성합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if store is None:
        _init_firebase(app)
        store = FirestoreStore()
    logging.info("Document store initialized successfully")

    if media_service is None:
        try:
            media_service = MediaService()
            media_service.init_app(app)
        except Exception as e:
            logging.error(f"Failed to initialize media service: {e}")
            raise

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {
        'store': store,
        'media': media_service,
        'users': UserService(store),
        'posts': PostService(store, media_service, upload_folder=app.config['MEDIA_UPLOAD_FOLDER']),
        'comments': CommentService(store),
    }

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({"success": False, "error_code": "UNAUTHORIZED", "message": reason}), 401

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({"success": False, "error_code": "INVALID_TOKEN", "message": reason}), 401

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"success": False, "error_code": "TOKEN_EXPIRED", "message": "토큰이 만료되었습니다."}), 401

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        return validation_error_response(err.messages)

    @app.errorhandler(413)
    def handle_payload_too_large(err):
        return jsonify({"success": False, "error_code": "PAYLOAD_TOO_LARGE", "message": "업로드 가능한 파일 크기를 초과했습니다."}), 413

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify({"success": False, "error_code": "NOT_FOUND", "message": "요청한 경로를 찾을 수 없습니다."}), 404

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        if isinstance(err, HTTPException):
            return jsonify({"success": False, "error_code": err.name.upper().replace(" ", "_"), "message": err.description}), err.code
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        return jsonify({
            "success": False,
            "error_code": "INTERNAL_SERVER_ERROR",
            "message": "서버 내부에서 예상치 못한 오류가 발생했습니다.",
            "error": str(err)
        }), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
