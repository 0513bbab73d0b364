"""
규칙 평가 서비스

레코드마다 규칙 목록을 순서대로 적용하고,
평가가 끝난 뒤 제안 이름의 충돌 여부를 검증합니다.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable

from service.repository import Assessment, RepositoryRecord
from service.rules import Rule

# GitHub 리포지토리 이름 규칙: 영문자, 숫자, -, _, . 만 허용
VALID_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+$")


@dataclass(frozen=True)
class NamingConflict:
    proposed_name: str
    names: tuple[str, ...]

    def __str__(self):
        return f"이름 충돌: {', '.join(self.names)} → {self.proposed_name}"


@dataclass
class ValidationResult:
    """
    검증 결과

    conflicts는 경고이며 처리를 중단하지 않습니다.
    errors가 하나라도 있으면 failed가 True가 되고, 출력 파일을 쓰기 전에 중단해야 합니다.
    """

    conflicts: list[NamingConflict] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def warnings(self) -> list[str]:
        return [str(conflict) for conflict in self.conflicts]


def evaluate_record(record: RepositoryRecord, rules: Iterable[Rule]) -> Assessment:
    assessment = Assessment(record=record)
    for rule in rules:
        rule.visit(assessment)
    return assessment


def evaluate(records: Iterable[RepositoryRecord], rules: list[Rule]) -> list[Assessment]:
    """
    모든 레코드에 규칙 목록을 적용하는 함수

    레코드마다 새 Assessment를 만들기 때문에 한 레코드의 결과가
    다른 레코드에 영향을 주지 않습니다.

    Args:
        records: 리포지토리 레코드 목록
        rules: 순서가 정해진 규칙 목록

    Returns:
        list[Assessment]: 레코드 순서대로의 평가 결과
    """
    return [evaluate_record(record, rules) for record in records]


def validate(assessments: list[Assessment]) -> ValidationResult:
    """
    평가 결과를 검증하는 함수

    - 같은 이름을 제안받은 리포지토리가 둘 이상이면 충돌 경고
    - 제안 이름이 GitHub 이름 규칙에 맞지 않으면 오류

    Args:
        assessments: evaluate()의 결과

    Returns:
        ValidationResult: 검증 결과
    """
    result = ValidationResult()

    groups: dict[str, list[str]] = {}
    for assessment in assessments:
        groups.setdefault(assessment.proposed_name, []).append(assessment.name)

        # failed를 설정하는 유일한 조건: GitHub 리포지토리 이름 규칙 위반
        if not VALID_NAME_PATTERN.match(assessment.proposed_name):
            result.errors.append(
                f"{assessment.name}: 제안 이름 '{assessment.proposed_name}'이 "
                "GitHub 리포지토리 이름 규칙에 맞지 않습니다."
            )

    for proposed_name, names in groups.items():
        if len(names) > 1:
            result.conflicts.append(NamingConflict(proposed_name, tuple(names)))

    return result
