"""
스냅샷의 모든 리포지토리를 로컬 디렉토리에 동기화하는 스크립트

로컬에 없는 리포지토리는 clone하고, 이미 있는 리포지토리는 fast-forward pull합니다.

사용법:
    python scripts/repo_admin/sync_clones.py SNAPSHOT DEST [--dry-run] [--ssh]

옵션:
    --dry-run: 실제 git 명령 없이 어떤 작업이 수행될지 확인
    --ssh: HTTPS 대신 SSH URL로 clone
"""
import argparse
import os
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scripts.repo_admin.common import SEPARATOR
from service import git
from service.github import load_snapshot
from service.repository import RepositoryRecord


def sync_repository(
    record: RepositoryRecord, dest: Path, use_ssh: bool, dry_run: bool
) -> str:
    """
    리포지토리 하나를 동기화하는 함수

    Args:
        record: 리포지토리 레코드
        dest: 클론을 모아두는 디렉토리
        use_ssh: SSH URL 사용 여부
        dry_run: dry-run 모드 여부

    Returns:
        str: 수행한 작업 ("clone", "pull", "skip")

    Raises:
        RuntimeError: git 명령이 실패한 경우
    """
    path = dest / record.name

    if path.exists():
        if not git.is_git_repo(path):
            return "skip"
        if not dry_run:
            git.pull(path)
        return "pull"

    if not dry_run:
        git.clone(record.ssh_url if use_ssh else record.clone_url, path)
    return "clone"


def main():
    parser = argparse.ArgumentParser(
        description="스냅샷의 모든 리포지토리를 로컬 디렉토리에 clone 또는 pull합니다."
    )
    parser.add_argument("snapshot", help="fetch_snapshot.py로 만든 스냅샷 파일")
    parser.add_argument("dest", help="클론을 모아두는 디렉토리")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="실제 git 명령 없이 어떤 작업이 수행될지 확인",
    )
    parser.add_argument(
        "--ssh",
        action="store_true",
        help="HTTPS 대신 SSH URL로 clone",
    )
    args = parser.parse_args()

    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    dest = Path(args.dest)
    if not args.dry_run:
        dest.mkdir(parents=True, exist_ok=True)

    print(f"Organization: {snapshot.org}")
    print(f"대상 디렉토리: {dest}")
    print(SEPARATOR)

    success_count = 0
    skip_count = 0
    error_count = 0

    for record in snapshot.records:
        try:
            action = sync_repository(record, dest, args.ssh, args.dry_run)
        except RuntimeError as e:
            print(f"[ERROR] {record.name}: {e}")
            error_count += 1
            continue

        if action == "skip":
            print(f"[SKIP] {record.name}: git 리포지토리가 아닌 디렉토리가 이미 있음")
            skip_count += 1
        elif args.dry_run:
            print(f"[DRY-RUN] {record.name}: {action} 예정")
            success_count += 1
        else:
            print(f"[SUCCESS] {record.name}: {action} 완료")
            success_count += 1

    print(SEPARATOR)
    print(f"완료: 성공 {success_count}, 스킵 {skip_count}, 오류 {error_count}")


if __name__ == "__main__":
    main()
