"""
GitHub Organization의 모든 리포지토리 메타데이터를 JSON 스냅샷으로 저장하는 스크립트

감사(audit_repos.py)와 클론 동기화(sync_clones.py)는 이 스냅샷만 읽으므로,
API 요청은 이 스크립트에서 한 번만 발생합니다.

사용법:
    python scripts/repo_admin/fetch_snapshot.py OUTPUT [--org ORG] [--include-archived]

옵션:
    --org: 대상 Organization (기본값: 환경변수 GITHUB_ORG_NAME)
    --include-archived: Archive된 리포지토리도 포함
"""
import argparse
import os
import sys
from datetime import datetime, timezone

from github import GithubException

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scripts.repo_admin.common import (
    SEPARATOR,
    error_message,
    get_all_repos,
    get_github_client,
    get_org_name,
    get_organization,
)
from service.github import build_repository_record, save_snapshot


def fetch_records(org, include_archived: bool = False) -> tuple[list, int]:
    """
    Organization의 리포지토리를 모두 RepositoryRecord로 변환하는 함수

    개별 리포지토리 조회에 실패하면 오류를 출력하고 다음 리포지토리로 넘어갑니다.

    Args:
        org: PyGithub Organization 객체
        include_archived: Archive된 리포지토리 포함 여부

    Returns:
        tuple: (이름순으로 정렬된 레코드 목록, 오류 수)
    """
    records = []
    error_count = 0

    for repo in get_all_repos(org, include_archived=include_archived):
        try:
            records.append(build_repository_record(repo))
            print(f"[SUCCESS] {repo.name}")
        except GithubException as e:
            print(f"[ERROR] {repo.name}: {error_message(e)}")
            error_count += 1

    records.sort(key=lambda record: record.name.lower())
    return records, error_count


def main():
    parser = argparse.ArgumentParser(
        description="Organization의 리포지토리 메타데이터를 JSON 스냅샷으로 저장합니다."
    )
    parser.add_argument("output", help="저장할 스냅샷 파일 경로 (예: snapshot.json)")
    parser.add_argument(
        "--org",
        default=None,
        help="대상 Organization (기본값: 환경변수 GITHUB_ORG_NAME)",
    )
    parser.add_argument(
        "--include-archived",
        action="store_true",
        help="Archive된 리포지토리도 포함",
    )
    args = parser.parse_args()

    # GitHub 클라이언트 초기화
    g = get_github_client()
    org_name = get_org_name(args.org)
    org = get_organization(g, org_name)

    print(f"Organization: {org_name}")
    print(SEPARATOR)

    fetched_at = datetime.now(timezone.utc)
    records, error_count = fetch_records(org, include_archived=args.include_archived)
    save_snapshot(args.output, org_name, records, fetched_at)

    print(SEPARATOR)
    print(f"완료: 성공 {len(records)}, 오류 {error_count}")
    print(f"스냅샷 저장: {args.output}")


if __name__ == "__main__":
    main()
