"""
State store: 영속 key-value 저장소.

규칙:
- 값은 JSON 직렬화 가능한 dict/list/str/...
- update(): 락 안에서 read → fn(current) → write (check-and-set)
  fn이 None을 반환하면 키 삭제
- 원자적 쓰기: temp → rename + fsync
- 파일 저장소: filelock으로 프로세스 간 직렬화
"""

import copy
import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

from filelock import FileLock, Timeout

from src.domain.errors import ErrorCodes, WedContestError

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """영속 key-value 저장소 인터페이스."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> bool: ...

    def update(self, key: str, fn: Callable[[Any], Any]) -> Any: ...


# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """디렉토리 fsync (rename 엔트리 내구성, 지원되는 환경에서만)."""
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.debug(f"Directory fsync skipped for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - fsync 실패 시 경고 남기고 계속 진행
    - 실패 시 temp 파일 정리, 원본 유지

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


# =============================================================================
# JSON File Store
# =============================================================================


class JsonStateStore:
    """
    JSON 파일 기반 저장소.

    구조:
    <path>        # {"key": value, ...}
    <path>.lock   # filelock
    """

    LOCK_TIMEOUT = 10.0

    def __init__(self, path: Path, lock_timeout: float | None = None) -> None:
        self.path = Path(path)
        self.lock_timeout = lock_timeout if lock_timeout is not None else self.LOCK_TIMEOUT
        self._lock_path = self.path.with_name(self.path.name + ".lock")

    @contextmanager
    def _locked(self) -> Generator[None, None, None]:
        """
        저장소 락.

        Raises:
            WedContestError: STATE_LOCK_TIMEOUT, STATE_IO_FAILED (읽기/쓰기 OSError)
        """
        lock = FileLock(self._lock_path, timeout=self.lock_timeout)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            lock.acquire()
        except Timeout:
            raise WedContestError(
                ErrorCodes.STATE_LOCK_TIMEOUT,
                path=str(self.path),
                timeout=self.lock_timeout,
            )
        except OSError as e:
            raise WedContestError(ErrorCodes.STATE_IO_FAILED, path=str(self.path), cause=str(e))
        try:
            yield
        except OSError as e:
            raise WedContestError(ErrorCodes.STATE_IO_FAILED, path=str(self.path), cause=str(e))
        finally:
            lock.release()

    def _read(self) -> dict[str, Any]:
        """
        전체 상태 읽기 (파일 없으면 빈 dict).

        Raises:
            WedContestError: STATE_CORRUPT
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise WedContestError(ErrorCodes.STATE_CORRUPT, path=str(self.path), cause=str(e))
        if not isinstance(data, dict):
            raise WedContestError(ErrorCodes.STATE_CORRUPT, path=str(self.path))
        return data

    def get(self, key: str, default: Any = None) -> Any:
        with self._locked():
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._locked():
            data = self._read()
            data[key] = value
            atomic_write_json(self.path, data)

    def delete(self, key: str) -> bool:
        with self._locked():
            data = self._read()
            if key not in data:
                return False
            del data[key]
            atomic_write_json(self.path, data)
            return True

    def update(self, key: str, fn: Callable[[Any], Any]) -> Any:
        """
        check-and-set.

        Args:
            key: 대상 키
            fn: 현재 값(없으면 None) → 새 값 (None이면 삭제)

        Returns:
            저장된 새 값
        """
        with self._locked():
            data = self._read()
            current = copy.deepcopy(data.get(key))
            new_value = fn(current)
            if new_value is None:
                if key in data:
                    del data[key]
                    atomic_write_json(self.path, data)
            elif new_value != data.get(key):
                data[key] = new_value
                atomic_write_json(self.path, data)
            return new_value


# =============================================================================
# In-Memory Store
# =============================================================================


class MemoryStateStore:
    """프로세스 내 저장소 (테스트/임시 실행용)."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return copy.deepcopy(self._data.get(key, default))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def update(self, key: str, fn: Callable[[Any], Any]) -> Any:
        with self._lock:
            new_value = fn(copy.deepcopy(self._data.get(key)))
            if new_value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = copy.deepcopy(new_value)
            return new_value
