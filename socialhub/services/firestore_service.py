# socialhub/services/firestore_service.py
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1.base_query import FieldFilter

from socialhub.utils.datetime_utils import DateTimeUtils

T = TypeVar('T')

USERS = 'users'
POSTS = 'posts'
COMMENTS = 'comments'

Filter = Tuple[str, str, Any]


class TransactionScope:
    """
    run_transaction 콜백에 전달되는 트랜잭션 범위 객체.
    Firestore 규칙상 모든 읽기(get)는 쓰기(set/update/delete)보다 먼저 수행되어야 합니다.
    """
    def __init__(self, db, transaction):
        self._db = db
        self._transaction = transaction

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snapshot = self._db.collection(collection).document(doc_id).get(transaction=self._transaction)
        return snapshot.to_dict() if snapshot.exists else None

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._transaction.set(self._db.collection(collection).document(doc_id), DateTimeUtils.for_firestore(data))

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        self._transaction.update(self._db.collection(collection).document(doc_id), DateTimeUtils.for_firestore(fields))

    def delete(self, collection: str, doc_id: str) -> None:
        self._transaction.delete(self._db.collection(collection).document(doc_id))


class FirestoreStore:
    """
    users / posts / comments 컬렉션에 대한 문서 저장소.
    앱 시작 시 한 번 생성되어 각 서비스 생성자에 주입됩니다.

    - 단일 문서 갱신(update, array_union, array_remove)은 각각 원자적입니다.
    - 여러 문서에 걸친 변경은 run_transaction으로 묶어야 합니다.
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()

    def _ref(self, collection: str, doc_id: str):
        return self.db.collection(collection).document(doc_id)

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._ref(collection, doc_id).get()
        return doc.to_dict() if doc.exists else None

    def get_many(self, collection: str, doc_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """
        ID 목록의 문서를 한 번에 조회합니다. (참조 목록 populate)
        결과는 입력 ID 순서를 따르며, 존재하지 않는 문서는 건너뜁니다.
        """
        doc_ids = list(doc_ids)
        if not doc_ids:
            return []
        refs = [self._ref(collection, doc_id) for doc_id in doc_ids]
        found = {snap.id: snap.to_dict() for snap in self.db.get_all(refs) if snap.exists}
        return [found[doc_id] for doc_id in doc_ids if doc_id in found]

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        data = DateTimeUtils.for_firestore(data)
        self._ref(collection, doc_id).set(data)
        return data

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """문서 필드를 갱신하고 갱신된 문서를 반환합니다. 문서가 없으면 None."""
        ref = self._ref(collection, doc_id)
        try:
            ref.update(DateTimeUtils.for_firestore(fields))
        except NotFound:
            logging.warning(f"존재하지 않는 문서 갱신 시도 ({collection}/{doc_id})")
            return None
        return ref.get().to_dict()

    def array_union(self, collection: str, doc_id: str, field: str, values: List[Any]) -> Optional[Dict[str, Any]]:
        """중복 없이 배열 필드에 값을 추가합니다. (set-add)"""
        return self.update(collection, doc_id, {field: firestore.ArrayUnion(values), 'updated_at': DateTimeUtils.now()})

    def array_remove(self, collection: str, doc_id: str, field: str, values: List[Any]) -> Optional[Dict[str, Any]]:
        """배열 필드에서 값을 제거합니다. 값이 없으면 아무것도 하지 않습니다. (set-remove)"""
        return self.update(collection, doc_id, {field: firestore.ArrayRemove(values), 'updated_at': DateTimeUtils.now()})

    def delete(self, collection: str, doc_id: str) -> None:
        self._ref(collection, doc_id).delete()

    def query(self, collection: str, filters: Iterable[Filter] = (), order_by: Optional[str] = None,
              descending: bool = False, limit: Optional[int] = None,
              start_after: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        필터/정렬/커서 기반 조회.

        :param filters: (필드, 연산자, 값) 튜플 목록
        :param start_after: 이전 페이지 마지막 문서의 ID
        """
        query = self.db.collection(collection)
        for field_path, op, value in filters:
            query = query.where(filter=FieldFilter(field_path, op, value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if start_after:
            cursor_doc = self._ref(collection, start_after).get()
            if cursor_doc.exists:
                query = query.start_after(cursor_doc)
        if limit:
            query = query.limit(limit)
        return [doc.to_dict() for doc in query.stream()]

    def run_transaction(self, fn: Callable[[TransactionScope], T]) -> T:
        """
        fn을 하나의 Firestore 트랜잭션 안에서 실행합니다.
        fn이 예외를 던지면 어떤 쓰기도 반영되지 않습니다. 경합 시 Firestore가 재시도합니다.
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _run(transaction):
            return fn(TransactionScope(self.db, transaction))

        return _run(transaction)
