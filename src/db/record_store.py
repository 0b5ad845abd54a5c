"""
레코드 저장소 모듈

테이블명 -> 레코드 리스트 형태의 읽기 전용 저장소.
기본 구현은 data 디렉토리의 JSON 파일(`<table>.json`)을 읽는다.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Type, TypeVar
from pydantic import ValidationError as PydanticValidationError
from src.db.base import RecordModel
from src.utils.exceptions import RecordStoreError
from src.utils.logger import get_logger

logger = get_logger(__name__)

USERS_TABLE = "users"
PAYMENTS_TABLE = "payments"
LAWYERS_TABLE = "lawyers"
COURT_VISITS_TABLE = "court_visits"

TABLES = (USERS_TABLE, PAYMENTS_TABLE, LAWYERS_TABLE, COURT_VISITS_TABLE)

ModelT = TypeVar("ModelT", bound=RecordModel)


class RecordStore(Protocol):
    """읽기 전용 레코드 저장소 인터페이스"""

    def read(self, table_name: str) -> List[Dict[str, Any]]:
        ...

    def health_check(self) -> bool:
        ...


class JsonRecordStore:
    """JSON 파일 기반 레코드 저장소"""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def _table_path(self, table_name: str) -> Path:
        return self.data_dir / f"{table_name}.json"

    def read(self, table_name: str) -> List[Dict[str, Any]]:
        """
        테이블 레코드 조회

        Args:
            table_name: 테이블명 (users, payments, lawyers, court_visits)

        Returns:
            레코드 리스트 (파일이 없으면 빈 리스트)

        Raises:
            RecordStoreError: 파일을 읽을 수 없거나 형식이 잘못된 경우
        """
        path = self._table_path(table_name)
        if not path.exists():
            logger.debug(f"테이블 파일 없음, 빈 테이블로 처리: {path}")
            return []

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"테이블 읽기 실패: {path} - {str(e)}")
            raise RecordStoreError(str(e), table=table_name) from e

        if not isinstance(data, list):
            raise RecordStoreError("테이블 데이터는 배열이어야 합니다", table=table_name)

        return [record for record in data if isinstance(record, dict)]

    def health_check(self) -> bool:
        """
        저장소 상태 확인

        Returns:
            data 디렉토리 접근 가능 여부
        """
        healthy = self.data_dir.is_dir()
        if not healthy:
            logger.warning(f"레코드 저장소 디렉토리를 찾을 수 없습니다: {self.data_dir}")
        return healthy


class InMemoryRecordStore:
    """메모리 기반 레코드 저장소 (테스트 및 임베딩용)"""

    def __init__(self, tables: Mapping[str, Iterable[Dict[str, Any]]] = None):
        self._tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(record) for record in records]
            for name, records in (tables or {}).items()
        }

    def read(self, table_name: str) -> List[Dict[str, Any]]:
        # 호출자가 원본을 변경하지 못하도록 복사본 반환
        return [dict(record) for record in self._tables.get(table_name, [])]

    def health_check(self) -> bool:
        return True


def read_models(store: RecordStore, table_name: str, model: Type[ModelT]) -> List[ModelT]:
    """
    테이블 레코드를 모델로 변환하여 조회

    형식이 맞지 않는 레코드는 경고 로그를 남기고 건너뛴다.

    Args:
        store: 레코드 저장소
        table_name: 테이블명
        model: 레코드 모델 클래스

    Returns:
        모델 인스턴스 리스트
    """
    models: List[ModelT] = []
    for index, record in enumerate(store.read(table_name)):
        try:
            models.append(model.model_validate(record))
        except PydanticValidationError as e:
            logger.warning(
                f"잘못된 레코드 건너뜀: {table_name}[{index}] - {e.error_count()}개 필드 오류"
            )
    return models
