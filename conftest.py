# conftest.py
"""
공용 pytest 픽스처

- InMemoryStore: FirestoreStore와 같은 인터페이스의 메모리 저장소 (트랜잭션 실패 시 롤백)
- FakeMediaService: 업로드 호출을 기록하는 미디어 서비스 (썸네일 URL 규칙은 실제 구현 사용)
"""
import copy
from typing import Any, Dict, List, Optional

import pytest
from flask_jwt_extended import create_access_token

from socialhub import create_app
from socialhub.api.comments.services import CommentService
from socialhub.api.posts.services import PostService
from socialhub.api.users.services import UserService
from socialhub.core.errors import MediaUploadError
from socialhub.core.security import Identity
from socialhub.services.media_service import MediaService, UploadResult


class _InMemoryTransaction:
    def __init__(self, store: "InMemoryStore"):
        self._store = store
        self._writing = False

    def get(self, collection, doc_id):
        assert not self._writing, "트랜잭션 안에서는 모든 읽기가 쓰기보다 먼저 수행되어야 합니다."
        return self._store.get(collection, doc_id)

    def set(self, collection, doc_id, data):
        self._writing = True
        self._store.set(collection, doc_id, data)

    def update(self, collection, doc_id, fields):
        self._writing = True
        if self._store.update(collection, doc_id, fields) is None:
            raise KeyError(f"{collection}/{doc_id}")

    def delete(self, collection, doc_id):
        self._writing = True
        self._store.delete(collection, doc_id)


class InMemoryStore:
    """FirestoreStore 계약을 따르는 테스트용 메모리 저장소."""

    def __init__(self):
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_on_update: Optional[str] = None  # 지정한 컬렉션 갱신 시 예외 발생

    def _collection(self, name):
        return self.data.setdefault(name, {})

    def get(self, collection, doc_id):
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def get_many(self, collection, doc_ids):
        docs = self._collection(collection)
        return [copy.deepcopy(docs[doc_id]) for doc_id in doc_ids if doc_id in docs]

    def set(self, collection, doc_id, data):
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return copy.deepcopy(data)

    def update(self, collection, doc_id, fields):
        if self.fail_on_update == collection:
            raise RuntimeError("store unavailable")
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        doc.update(copy.deepcopy(fields))
        return copy.deepcopy(doc)

    def array_union(self, collection, doc_id, field, values):
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        current = doc.setdefault(field, [])
        for value in values:
            if value not in current:
                current.append(value)
        return copy.deepcopy(doc)

    def array_remove(self, collection, doc_id, field, values):
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return None
        doc[field] = [value for value in doc.get(field, []) if value not in values]
        return copy.deepcopy(doc)

    def delete(self, collection, doc_id):
        self._collection(collection).pop(doc_id, None)

    def query(self, collection, filters=(), order_by=None, descending=False, limit=None, start_after=None) -> List[Dict[str, Any]]:
        docs = list(self._collection(collection).values())
        for field_path, op, value in filters:
            assert op == '==', f"지원하지 않는 연산자: {op}"
            docs = [doc for doc in docs if doc.get(field_path) == value]
        if order_by:
            docs.sort(key=lambda doc: doc[order_by], reverse=descending)
        if start_after:
            ids = [doc.get(f"{collection[:-1]}_id") for doc in docs]
            if start_after in ids:
                docs = docs[ids.index(start_after) + 1:]
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    def run_transaction(self, fn):
        snapshot = copy.deepcopy(self.data)
        try:
            return fn(_InMemoryTransaction(self))
        except Exception:
            self.data = snapshot
            raise


class FakeMediaService(MediaService):
    """업로드는 기록만 하고, 썸네일 URL은 실제 Cloudinary URL 규칙으로 만듭니다."""

    def __init__(self):
        super().__init__(cloud_name="demo")
        self.uploads = []
        self.destroyed = []
        self.next_result = UploadResult(url="https://cdn/x.mp4", storage_id="x")
        self.fail = False

    def upload(self, buffer, resource_kind, folder):
        self.uploads.append({"size": len(buffer), "resource_kind": resource_kind, "folder": folder})
        if self.fail:
            raise MediaUploadError("미디어 업로드에 실패했습니다: timeout")
        return self.next_result

    def destroy(self, storage_id, resource_kind):
        self.destroyed.append((storage_id, resource_kind))


@pytest.fixture
def store():
    return InMemoryStore()

@pytest.fixture
def media():
    return FakeMediaService()

@pytest.fixture
def user_service(store):
    return UserService(store)

@pytest.fixture
def post_service(store, media):
    return PostService(store, media, upload_folder="posts")

@pytest.fixture
def comment_service(store):
    return CommentService(store)

@pytest.fixture
def alice(user_service):
    return Identity(user_service.create_user("alice", "alice@example.com", "password123")["user_id"])

@pytest.fixture
def bob(user_service):
    return Identity(user_service.create_user("bob", "bob@example.com", "password456")["user_id"])

@pytest.fixture
def text_post(post_service, alice):
    return post_service.create_post(alice, "text", title="hello", caption="first post")

@pytest.fixture
def app(store, media):
    app = create_app('testing', store=store, media_service=media)
    return app

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def auth_headers(app):
    def _headers(identity: Identity):
        with app.app_context():
            token = create_access_token(identity=identity.user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers
