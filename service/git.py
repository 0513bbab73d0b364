"""
로컬 git 명령 실행 서비스

로컬 클론 동기화와 이름 변경 적용에 필요한 git 명령만 다룹니다.
"""

import re
import subprocess
from pathlib import Path


def run_git(args: list[str], cwd: Path | None = None) -> str:
    """
    git 명령을 실행하는 함수

    Args:
        args: git 이후의 인자 목록 (예: ["pull", "--ff-only"])
        cwd: 실행 디렉토리

    Returns:
        str: 표준 출력 (앞뒤 공백 제거)

    Raises:
        RuntimeError: git 명령이 실패한 경우
    """
    cmd = ["git", *args]
    result = subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"명령 실패: {' '.join(cmd)}\n{result.stderr.strip()}")
    return result.stdout.strip()


def is_git_repo(path: Path) -> bool:
    return (Path(path) / ".git").exists()


def clone(url: str, dest: Path) -> None:
    run_git(["clone", url, str(dest)])


def pull(path: Path) -> str:
    return run_git(["pull", "--ff-only"], cwd=path)


def get_remote_url(path: Path, remote: str = "origin") -> str:
    return run_git(["remote", "get-url", remote], cwd=path)


def set_remote_url(path: Path, url: str, remote: str = "origin") -> None:
    run_git(["remote", "set-url", remote, url], cwd=path)


def renamed_remote_url(url: str, old_name: str, new_name: str) -> str:
    """
    remote URL의 리포지토리 이름 부분을 바꾸는 함수

    https://github.com/org/old.git, git@github.com:org/old.git 형식을 모두 처리합니다.

    Args:
        url: 기존 remote URL
        old_name: 기존 리포지토리 이름
        new_name: 새 리포지토리 이름

    Returns:
        str: 새 remote URL

    Raises:
        ValueError: URL이 old_name으로 끝나지 않는 경우
    """
    pattern = re.compile(rf"([/:]){re.escape(old_name)}(\.git)?/?$")
    if not pattern.search(url):
        raise ValueError(f"remote URL이 '{old_name}'을 가리키지 않습니다: {url}")
    return pattern.sub(lambda m: f"{m.group(1)}{new_name}{m.group(2) or ''}", url)
