"""
리포지토리 레코드 모델

GitHub에서 가져온 리포지토리 스냅샷(RepositoryRecord)과
규칙 평가 중 누적되는 결과(Assessment)를 정의합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def parse_timestamp(value: str | None) -> datetime | None:
    """
    ISO-8601 문자열을 datetime으로 변환하는 함수

    GitHub API의 "Z" 접미사도 처리합니다.

    Args:
        value: ISO-8601 문자열 (None 허용)

    Returns:
        datetime | None: 변환된 datetime (입력이 비어있으면 None)
    """
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


@dataclass(frozen=True)
class LastCommit:
    """기본 브랜치 최신 커밋 정보"""

    committer: str
    date: datetime
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "committer": self.committer,
            "date": format_timestamp(self.date),
            "url": self.url,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LastCommit | None":
        # 날짜가 없는 커밋은 커밋이 없는 것으로 취급
        date = parse_timestamp(d.get("date"))
        if date is None:
            return None
        return LastCommit(
            committer=str(d["committer"]),
            date=date,
            url=str(d.get("url") or ""),
        )


@dataclass(frozen=True)
class RepositoryRecord:
    """
    원격 리포지토리 하나의 스냅샷

    스냅샷 파일에서 한 번 생성된 뒤에는 변경되지 않습니다.
    규칙은 이 객체의 필드를 읽기만 합니다.
    """

    name: str
    description: str | None = None
    is_private: bool = False
    is_fork: bool = False
    parent: str | None = None  # "owner/name" (fork인 경우만)
    parent_url: str | None = None
    url: str = ""
    pushed_at: datetime | None = None
    last_commit: LastCommit | None = None
    root_files: frozenset[str] = field(default_factory=frozenset)
    is_archived: bool = False
    default_branch: str = "main"
    clone_url: str = ""
    ssh_url: str = ""

    @property
    def last_activity(self) -> datetime | None:
        """마지막 push 시각 (없으면 최신 커밋 시각)"""
        if self.pushed_at is not None:
            return self.pushed_at
        if self.last_commit is not None:
            return self.last_commit.date
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "is_private": self.is_private,
            "is_fork": self.is_fork,
            "parent": self.parent,
            "parent_url": self.parent_url,
            "url": self.url,
            "pushed_at": format_timestamp(self.pushed_at),
            "last_commit": self.last_commit.to_dict() if self.last_commit else None,
            "root_files": sorted(self.root_files),
            "is_archived": self.is_archived,
            "default_branch": self.default_branch,
            "clone_url": self.clone_url,
            "ssh_url": self.ssh_url,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RepositoryRecord":
        """
        스냅샷 JSON의 딕셔너리로부터 레코드를 생성하는 함수

        Args:
            d: to_dict()가 만든 형태의 딕셔너리

        Returns:
            RepositoryRecord: 생성된 레코드

        Raises:
            KeyError: name 필드가 없는 경우
        """
        last_commit = d.get("last_commit")
        return RepositoryRecord(
            name=str(d["name"]),
            description=d.get("description"),
            is_private=bool(d.get("is_private", False)),
            is_fork=bool(d.get("is_fork", False)),
            parent=d.get("parent"),
            parent_url=d.get("parent_url"),
            url=str(d.get("url") or ""),
            pushed_at=parse_timestamp(d.get("pushed_at")),
            last_commit=LastCommit.from_dict(last_commit) if last_commit else None,
            root_files=frozenset(d.get("root_files") or []),
            is_archived=bool(d.get("is_archived", False)),
            default_branch=str(d.get("default_branch") or "main"),
            clone_url=str(d.get("clone_url") or ""),
            ssh_url=str(d.get("ssh_url") or ""),
        )


@dataclass
class Assessment:
    """
    레코드 하나에 대한 규칙 평가 누적 결과

    규칙은 순서대로 이 객체에 관찰 내용(observations)과 권고(recommendations)를
    추가하고, 이름 변경 규칙은 proposed_name을 수정합니다.
    """

    record: RepositoryRecord
    proposed_name: str = ""
    observations: list[str] = field(default_factory=list)
    recommendations: list = field(default_factory=list)

    def __post_init__(self):
        if not self.proposed_name:
            self.proposed_name = self.record.name

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def renamed(self) -> bool:
        return self.proposed_name != self.record.name

    def unique_recommendations(self) -> list:
        # 순서 유지 중복 제거
        return list(dict.fromkeys(self.recommendations))
