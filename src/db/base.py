"""
레코드 모델 Base 클래스
"""
from typing import Any, ClassVar, Dict, FrozenSet
from pydantic import BaseModel, ConfigDict


class RecordModel(BaseModel):
    """
    레코드 저장소의 한 행을 표현하는 기본 모델

    저장소 파일에 정의되지 않은 추가 필드도 그대로 보존한다.
    """
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    # 클라이언트 응답에서 제외할 필드
    private_fields: ClassVar[FrozenSet[str]] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        """모델을 딕셔너리로 변환"""
        return self.model_dump(exclude=set(self.private_fields))

    def to_json(self) -> Dict[str, Any]:
        """모델을 JSON 직렬화 가능한 딕셔너리로 변환"""
        return self.model_dump(mode="json", exclude=set(self.private_fields))
