"""
GitHub API 공통 유틸리티 모듈

PyGithub 라이브러리를 사용하여 Organization의 리포지토리를 조회합니다.
보안을 위해 토큰은 환경변수로 관리됩니다.
"""
import os
import sys
from typing import Generator

from dotenv import load_dotenv
from github import Github, GithubException
from github.Organization import Organization
from github.Repository import Repository

# 프로젝트 루트의 .env 파일 로드
load_dotenv()

SEPARATOR = "-" * 50


def get_github_client() -> Github:
    """
    GitHub 클라이언트를 생성하는 함수

    환경변수 GITHUB_ADMIN_TOKEN이 필요합니다.
    스냅샷 수집은 리포지토리 메타데이터, 기본 브랜치 최신 커밋, 루트 파일 목록을 읽기만 합니다.
    private 리포지토리를 포함하려면 classic 토큰은 repo 권한이,
    Fine-grained 토큰은 Metadata와 Contents 읽기 권한이 필요합니다.
    Organization 관리자 권한은 필요하지 않습니다.

    Returns:
        Github: PyGithub 클라이언트 인스턴스

    Raises:
        ValueError: GITHUB_ADMIN_TOKEN 환경변수가 설정되지 않은 경우
    """
    token = os.getenv("GITHUB_ADMIN_TOKEN")
    if not token:
        raise ValueError(
            "GITHUB_ADMIN_TOKEN 환경변수가 설정되지 않았습니다. "
            "리포지토리 조회 권한이 있는 토큰을 .env 파일에 설정해주세요."
        )

    # 토큰 형식 기본 검증 (ghp_ 또는 github_pat_ 접두사)
    if not (token.startswith("ghp_") or token.startswith("github_pat_")):
        print(
            "경고: GitHub 토큰 형식이 예상과 다릅니다. "
            "Personal Access Token 또는 Fine-grained Token인지 확인해주세요.",
            file=sys.stderr,
        )

    return Github(token, timeout=30, retry=3)


def get_org_name(org_name: str | None = None) -> str:
    """
    Organization 이름을 가져오는 함수

    Args:
        org_name: 명령행에서 지정한 이름 (None이면 환경변수 GITHUB_ORG_NAME 사용)

    Returns:
        str: Organization 이름

    Raises:
        ValueError: 이름이 지정되지 않았고 GITHUB_ORG_NAME 환경변수도 없는 경우
    """
    org_name = org_name or os.getenv("GITHUB_ORG_NAME")
    if not org_name:
        raise ValueError(
            "GITHUB_ORG_NAME 환경변수가 설정되지 않았습니다. "
            ".env 파일 또는 --org 옵션을 확인해주세요."
        )
    return org_name


def get_organization(g: Github, org_name: str) -> Organization:
    """
    GitHub Organization 객체를 가져오는 함수

    Args:
        g: PyGithub 클라이언트
        org_name: Organization 이름

    Returns:
        Organization: PyGithub Organization 객체

    Raises:
        ValueError: Organization을 찾을 수 없는 경우
    """
    try:
        return g.get_organization(org_name)
    except GithubException as e:
        if e.status == 404:
            raise ValueError(f"Organization '{org_name}'을 찾을 수 없습니다.") from e
        raise


def get_all_repos(
    org: Organization, include_forks: bool = True, include_archived: bool = False
) -> Generator[Repository, None, None]:
    """
    Organization의 모든 리포지토리를 가져오는 제너레이터 함수

    PyGithub가 페이지네이션을 처리하므로 끝까지 순회하면 모든 리포지토리를 얻습니다.

    Args:
        org: PyGithub Organization 객체
        include_forks: Fork된 리포지토리 포함 여부 (기본값: True, fork도 감사 대상)
        include_archived: Archive된 리포지토리 포함 여부 (기본값: False)

    Yields:
        Repository: 필터링 조건을 만족하는 리포지토리
    """
    for repo in org.get_repos(type="all"):
        # Fork 리포지토리 필터링
        if not include_forks and repo.fork:
            continue

        # Archive된 리포지토리 필터링
        if not include_archived and repo.archived:
            continue

        yield repo


def error_message(e: GithubException) -> str:
    if isinstance(e.data, dict):
        return e.data.get("message", str(e))
    return str(e)
