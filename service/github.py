"""
GitHub API 관련 서비스 레이어입니다.
PyGithub Repository 객체를 RepositoryRecord로 변환하고, 스냅샷 파일을 읽고 씁니다.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable

# PyGithub 라이브러리에서 필요한 클래스 임포트
from github import GithubException
from github.Repository import Repository

from service.repository import (
    LastCommit,
    RepositoryRecord,
    format_timestamp,
    parse_timestamp,
)

# 빈 리포지토리에 대해 GitHub이 돌려주는 상태 코드
EMPTY_REPOSITORY_STATUSES = (404, 409)


@dataclass
class Snapshot:
    org: str
    fetched_at: datetime | None
    records: list[RepositoryRecord] = field(default_factory=list)


def fetch_last_commit(repo: Repository) -> LastCommit | None:
    """
    기본 브랜치의 최신 커밋 정보를 가져오는 함수

    Args:
        repo: PyGithub Repository 객체

    Returns:
        LastCommit | None: 최신 커밋 정보 (빈 리포지토리면 None)
    """
    try:
        commit = repo.get_branch(repo.default_branch).commit
    except GithubException as e:
        if e.status in EMPTY_REPOSITORY_STATUSES:
            return None
        raise

    git_committer = commit.commit.committer
    # GitHub 계정과 연결된 커밋이면 login, 아니면 git 설정의 이름
    committer = commit.committer.login if commit.committer else git_committer.name
    return LastCommit(
        committer=committer,
        date=git_committer.date,
        url=commit.html_url,
    )


def fetch_root_files(repo: Repository) -> frozenset[str]:
    """
    기본 브랜치 루트 디렉토리의 파일 이름 목록을 가져오는 함수

    Args:
        repo: PyGithub Repository 객체

    Returns:
        frozenset[str]: 파일 이름 집합 (빈 리포지토리면 빈 집합)
    """
    try:
        contents = repo.get_contents("", ref=repo.default_branch)
    except GithubException as e:
        if e.status in EMPTY_REPOSITORY_STATUSES:
            return frozenset()
        raise

    # 루트 경로 조회는 목록을 반환하지만, 단일 객체인 경우도 처리
    if not isinstance(contents, list):
        contents = [contents]
    return frozenset(content.name for content in contents)


def build_repository_record(repo: Repository) -> RepositoryRecord:
    """
    PyGithub Repository 객체를 RepositoryRecord로 변환하는 함수

    커밋과 루트 파일 조회로 리포지토리당 API 요청이 두 번 추가됩니다.

    Args:
        repo: PyGithub Repository 객체

    Returns:
        RepositoryRecord: 변환된 레코드
    """
    parent = repo.parent if repo.fork else None
    return RepositoryRecord(
        name=repo.name,
        description=repo.description,
        is_private=repo.private,
        is_fork=repo.fork,
        parent=parent.full_name if parent else None,
        parent_url=parent.html_url if parent else None,
        url=repo.html_url,
        pushed_at=repo.pushed_at,
        last_commit=fetch_last_commit(repo),
        root_files=fetch_root_files(repo),
        is_archived=repo.archived,
        default_branch=repo.default_branch,
        clone_url=repo.clone_url,
        ssh_url=repo.ssh_url,
    )


def save_snapshot(
    path: Path,
    org: str,
    records: Iterable[RepositoryRecord],
    fetched_at: datetime,
) -> None:
    data = {
        "org": org,
        "fetched_at": format_timestamp(fetched_at),
        "repositories": [record.to_dict() for record in records],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")


def load_snapshot(path: Path) -> Snapshot:
    """
    스냅샷 파일을 읽는 함수

    Args:
        path: fetch_snapshot.py가 만든 JSON 파일 경로

    Returns:
        Snapshot: Organization 이름과 레코드 목록

    Raises:
        FileNotFoundError: 파일이 없는 경우
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"스냅샷 파일을 찾을 수 없습니다: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return Snapshot(
        org=str(data["org"]),
        fetched_at=parse_timestamp(data.get("fetched_at")),
        records=[RepositoryRecord.from_dict(d) for d in data.get("repositories", [])],
    )
