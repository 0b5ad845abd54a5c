"""
users.json 평문 비밀번호 -> Argon2 해시 변환 스크립트

사용법:
    python scripts/hash_passwords.py [users.json 경로]
"""
import sys
import os
import json

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config.settings import settings
from src.db.record_store import USERS_TABLE
from src.services.security import hash_password, needs_rehash
from src.utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def migrate_users(path: str) -> int:
    """
    평문 password 필드를 password_hash로 변환

    Args:
        path: users.json 경로

    Returns:
        변환된 사용자 수
    """
    with open(path, 'r', encoding='utf-8') as f:
        users = json.load(f)

    converted = 0
    for user in users:
        plain = user.pop("password", None)
        if plain:
            user["password_hash"] = hash_password(plain)
            converted += 1
        elif user.get("password_hash") and needs_rehash(user["password_hash"]):
            logger.warning(f"해시 파라미터 갱신 필요 (다음 로그인 시 재설정 권장): {user.get('case_number')}")

    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(users, f, ensure_ascii=False, indent=2)
    os.replace(tmp_path, path)

    return converted


if __name__ == "__main__":
    users_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(settings.data_dir, f"{USERS_TABLE}.json")

    if not os.path.exists(users_path):
        logger.error(f"파일을 찾을 수 없습니다: {users_path}")
        sys.exit(1)

    count = migrate_users(users_path)
    logger.info(f"비밀번호 해시 변환 완료: {count}명 ({users_path})")
