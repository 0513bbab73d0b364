"""
리포지토리 스냅샷을 규칙에 따라 감사하는 스크립트

결과로 두 파일을 생성합니다.
- {OUTPUT_PREFIX}.md: 리포지토리별 관찰 내용과 권고를 담은 보고서
- {OUTPUT_PREFIX}-renames.json: apply_renames.py가 읽는 이름 변경 계획

사용법:
    python scripts/repo_admin/audit_repos.py SNAPSHOT OUTPUT_PREFIX [--max-age-days N]

옵션:
    --max-age-days: 이 기간 동안 push가 없으면 archive 권고 (기본값: 730)
"""
import argparse
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from tabulate import tabulate

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from scripts.repo_admin.common import SEPARATOR
from service.evaluator import ValidationResult, evaluate, validate
from service.github import Snapshot, load_snapshot
from service.renames import RenamePlan, build_rename_plan, write_rename_plan
from service.repo_rules import DEFAULT_MAX_AGE, build_default_rules
from service.report import render_report, write_report
from service.rules import Rule


@dataclass
class AuditResult:
    report: str
    plan: RenamePlan
    validation: ValidationResult


def output_paths(output_prefix: str) -> tuple[Path, Path]:
    return Path(f"{output_prefix}.md"), Path(f"{output_prefix}-renames.json")


def audit(snapshot: Snapshot, rules: list[Rule], now: datetime) -> AuditResult:
    """
    스냅샷을 감사하여 보고서 내용과 이름 변경 계획을 만드는 함수

    파일은 쓰지 않습니다. 검증에 실패하면 보고서와 계획 없이 결과를 돌려줍니다.

    Args:
        snapshot: 리포지토리 스냅샷
        rules: 순서가 정해진 규칙 목록
        now: 보고서 생성 시각

    Returns:
        AuditResult: 보고서 내용, 이름 변경 계획, 검증 결과

    Raises:
        ValueError: 처리할 수 없는 권고 태그나 지원하지 않는 이름 변경 체인이 있는 경우
    """
    assessments = evaluate(snapshot.records, rules)
    validation = validate(assessments)
    if validation.failed:
        return AuditResult(report="", plan=RenamePlan(org=snapshot.org), validation=validation)

    plan = build_rename_plan(snapshot.org, assessments)

    warnings = list(validation.warnings)
    for old_name, new_name in plan.deferred:
        warnings.append(
            f"보류된 이름 변경: {old_name} → {new_name} (충돌 체인 해소 후 다음 실행에서 처리)"
        )

    report = render_report(snapshot.org, assessments, now, warnings=warnings)
    return AuditResult(report=report, plan=plan, validation=validation)


def print_plan(plan: RenamePlan) -> None:
    if not plan.renames:
        print("이름 변경 없음")
        return
    print(tabulate(plan.renames, headers=["기존 이름", "새 이름"], tablefmt="simple"))


def main():
    parser = argparse.ArgumentParser(
        description="리포지토리 스냅샷을 감사하여 보고서와 이름 변경 계획을 생성합니다."
    )
    parser.add_argument("snapshot", help="fetch_snapshot.py로 만든 스냅샷 파일")
    parser.add_argument(
        "output_prefix",
        help="출력 파일 경로 접두사 (예: reports/2024-05 → reports/2024-05.md)",
    )
    parser.add_argument(
        "--max-age-days",
        type=int,
        default=DEFAULT_MAX_AGE.days,
        help=f"이 기간 동안 push가 없으면 archive 권고 (기본값: {DEFAULT_MAX_AGE.days})",
    )
    args = parser.parse_args()

    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    now = datetime.now(timezone.utc)

    try:
        rules = build_default_rules(now=now, max_age=timedelta(days=args.max_age_days))
        result = audit(snapshot, rules, now)
    except ValueError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print(f"Organization: {snapshot.org}")
    print(f"리포지토리: {len(snapshot.records)}")
    print(SEPARATOR)

    for warning in result.validation.warnings:
        print(f"[WARN] {warning}")

    if result.validation.failed:
        for error in result.validation.errors:
            print(f"[ERROR] {error}")
        print("검증 실패로 출력 파일을 생성하지 않았습니다.")
        sys.exit(1)

    for old_name, new_name in result.plan.deferred:
        print(f"[WARN] 보류된 이름 변경: {old_name} → {new_name}")

    report_path, plan_path = output_paths(args.output_prefix)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    write_report(result.report, report_path)
    write_rename_plan(result.plan, plan_path)

    print_plan(result.plan)
    print(SEPARATOR)
    print(f"보고서: {report_path}")
    print(f"이름 변경 계획: {plan_path} ({len(result.plan.renames)}건)")


if __name__ == "__main__":
    main()
