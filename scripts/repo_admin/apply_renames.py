"""
이름 변경 계획을 로컬 클론에 적용하는 스크립트

audit_repos.py가 만든 {OUTPUT_PREFIX}-renames.json을 읽어
클론 디렉토리 이름과 origin remote URL을 변경합니다.

(x → y), (y → x) 같은 쌍도 처리할 수 있도록 두 단계로 진행합니다.
1. 모든 원본 디렉토리를 임시 이름으로 이동
2. 임시 이름을 새 이름으로 이동하고 remote URL 변경

사용법:
    python scripts/repo_admin/apply_renames.py PLAN DEST [--dry-run]

옵션:
    --dry-run: 실제 변경 없이 어떤 디렉토리가 변경될지 확인
"""
import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scripts.repo_admin.common import SEPARATOR
from service import git
from service.renames import RenamePlan, load_rename_plan

TEMP_PREFIX = ".renaming"


@dataclass
class PendingMove:
    old_name: str
    new_name: str
    temp_path: Path


def check_plan(plan: RenamePlan) -> None:
    """
    같은 디렉토리를 두 번 옮기거나 같은 대상으로 두 번 옮기는 계획인지 확인하는 함수

    Raises:
        ValueError: 원본 또는 대상 이름이 중복된 경우
    """
    sources = [old for old, _ in plan.renames]
    targets = [new for _, new in plan.renames]
    for label, names in (("원본", sources), ("대상", targets)):
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"이름 변경 계획에 중복된 {label} 이름이 있습니다: {', '.join(duplicates)}")


def update_remote(path: Path, old_name: str, new_name: str) -> None:
    if not git.is_git_repo(path):
        return
    url = git.get_remote_url(path)
    git.set_remote_url(path, git.renamed_remote_url(url, old_name, new_name))


def select_moves(plan: RenamePlan, dest: Path) -> tuple[list[tuple[int, str, str]], int, int]:
    """
    실제로 이동할 단계를 고르는 함수

    원본 디렉토리가 없으면 스킵하고, 대상 이름을 계획 밖의 디렉토리가 차지하고 있으면
    오류로 처리합니다. 대상이 이번에 이동하는 다른 원본이면 비워지므로 허용합니다.
    제외된 단계의 원본은 그대로 남기 때문에, 그 이름을 대상으로 하는 단계도
    더 이상 제외할 단계가 없을 때까지 반복해서 제외합니다.

    Args:
        plan: 이름 변경 계획
        dest: 클론을 모아둔 디렉토리

    Returns:
        tuple: ((순번, 기존 이름, 새 이름) 목록, 스킵 수, 오류 수)
    """
    skip_count = 0
    error_count = 0

    moves = []
    for index, (old_name, new_name) in enumerate(plan.renames):
        if not (dest / old_name).exists():
            print(f"[SKIP] {old_name}: 로컬 디렉토리 없음")
            skip_count += 1
            continue
        moves.append((index, old_name, new_name))

    while True:
        moving = {old_name for _, old_name, _ in moves}
        blocked = [
            move
            for move in moves
            if (dest / move[2]).exists() and move[2] not in moving
        ]
        if not blocked:
            return moves, skip_count, error_count

        for _, old_name, new_name in blocked:
            print(f"[ERROR] {old_name}: 대상 디렉토리 {new_name}이 이미 있음")
            error_count += 1
        moves = [move for move in moves if move not in blocked]


def restore(move: PendingMove, current: Path, dest: Path) -> str:
    # 실패한 디렉토리를 원래 이름으로 되돌리고, 최종 위치를 돌려줌
    original = dest / move.old_name
    if original.exists():
        return current.name
    current.rename(original)
    return original.name


def apply_renames(plan: RenamePlan, dest: Path, dry_run: bool = False) -> tuple[int, int, int]:
    """
    이름 변경 계획을 적용하는 함수

    어떤 디렉토리도 옮기기 전에 대상 이름이 비어있는지 확인합니다.
    2단계에서 실패한 디렉토리는 원래 이름으로 되돌립니다.

    Args:
        plan: 이름 변경 계획
        dest: 클론을 모아둔 디렉토리
        dry_run: dry-run 모드 여부

    Returns:
        tuple: (성공 수, 스킵 수, 오류 수)

    Raises:
        ValueError: 계획에 중복된 이름이 있는 경우
    """
    check_plan(plan)

    moves, skip_count, error_count = select_moves(plan, dest)
    success_count = 0

    if dry_run:
        for _, old_name, new_name in moves:
            print(f"[DRY-RUN] {old_name} → {new_name}")
        return len(moves), skip_count, error_count

    # 1단계: 원본 디렉토리를 모두 임시 이름으로 이동
    pending: list[PendingMove] = []
    for index, old_name, new_name in moves:
        temp_path = dest / f"{TEMP_PREFIX}-{index}-{old_name}"
        (dest / old_name).rename(temp_path)
        pending.append(PendingMove(old_name, new_name, temp_path))

    # 2단계: 임시 이름을 새 이름으로 이동
    for move in pending:
        target = dest / move.new_name
        try:
            move.temp_path.rename(target)
        except OSError as e:
            location = restore(move, move.temp_path, dest)
            print(f"[ERROR] {move.old_name} → {move.new_name}: 이동 실패: {e} (현재 위치: {location})")
            error_count += 1
            continue

        try:
            update_remote(target, move.old_name, move.new_name)
        except (RuntimeError, ValueError) as e:
            location = restore(move, target, dest)
            print(
                f"[ERROR] {move.old_name} → {move.new_name}: remote 변경 실패: {e} "
                f"(현재 위치: {location})"
            )
            error_count += 1
            continue

        print(f"[SUCCESS] {move.old_name} → {move.new_name}")
        success_count += 1

    return success_count, skip_count, error_count


def main():
    parser = argparse.ArgumentParser(
        description="이름 변경 계획을 로컬 클론 디렉토리와 remote URL에 적용합니다."
    )
    parser.add_argument("plan", help="audit_repos.py가 만든 이름 변경 계획 파일")
    parser.add_argument("dest", help="클론을 모아둔 디렉토리")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="실제 변경 없이 어떤 디렉토리가 변경될지 확인",
    )
    args = parser.parse_args()

    try:
        plan = load_rename_plan(args.plan)
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print(f"Organization: {plan.org}")
    print(f"대상 디렉토리: {args.dest}")
    print(SEPARATOR)

    try:
        success_count, skip_count, error_count = apply_renames(
            plan, Path(args.dest), dry_run=args.dry_run
        )
    except ValueError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    for old_name, new_name in plan.deferred:
        print(f"[WARN] 보류된 이름 변경 (이번 계획에 포함되지 않음): {old_name} → {new_name}")

    print(SEPARATOR)
    print(f"완료: 성공 {success_count}, 스킵 {skip_count}, 오류 {error_count}")
    if error_count:
        sys.exit(1)


if __name__ == "__main__":
    main()
