"""pytest 설정 파일"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from service.repository import LastCommit, RepositoryRecord  # noqa: E402

# 테스트 기준 시각 (규칙의 경과 시간 계산을 고정)
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """기본값이 채워진 RepositoryRecord를 만드는 팩토리"""

    def _make_record(name: str, days_ago: int = 10, **kwargs) -> RepositoryRecord:
        pushed_at = NOW - timedelta(days=days_ago)
        kwargs.setdefault("url", f"https://github.com/goodguide/{name}")
        kwargs.setdefault("clone_url", f"https://github.com/goodguide/{name}.git")
        kwargs.setdefault("ssh_url", f"git@github.com:goodguide/{name}.git")
        kwargs.setdefault("pushed_at", pushed_at)
        kwargs.setdefault(
            "last_commit",
            LastCommit(
                committer="alice",
                date=pushed_at,
                url=f"https://github.com/goodguide/{name}/commit/abc123",
            ),
        )
        return RepositoryRecord(name=name, **kwargs)

    return _make_record
