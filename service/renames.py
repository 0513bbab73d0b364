"""
이름 변경 계획 서비스

평가 결과로부터 (기존 이름 → 새 이름) 변경 계획을 만듭니다.

GitHub은 이름 변경 시 이전 이름에서 한 단계만 리다이렉트하므로,
A가 B의 현재 이름으로 바뀌고 B도 다른 이름으로 바뀌는 경우(충돌 체인)에는
단순 변경 순서가 안전하지 않습니다. 이런 경우는 두 단계 쌍으로 다시 작성합니다.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from service.repository import Assessment

RenameStep = tuple[str, str]


@dataclass
class RenamePlan:
    """
    이름 변경 계획

    renames는 순서대로 실행되어야 하는 (기존 이름, 새 이름) 목록이고,
    deferred는 충돌 체인 때문에 이번 계획에서 제외된 최종 변경입니다.
    """

    org: str
    renames: list[RenameStep] = field(default_factory=list)
    deferred: list[RenameStep] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "org": self.org,
            "renames": [[old, new] for old, new in self.renames],
            "deferred": [[old, new] for old, new in self.deferred],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RenamePlan":
        return RenamePlan(
            org=str(d["org"]),
            renames=[(str(old), str(new)) for old, new in d.get("renames", [])],
            deferred=[(str(old), str(new)) for old, new in d.get("deferred", [])],
        )


def rename_mapping(assessments: list[Assessment]) -> dict[str, str]:
    return {a.name: a.proposed_name for a in assessments if a.renamed}


def _chain_from(name: str, mapping: dict[str, str]) -> list[str]:
    # name에서 시작해 매핑 키를 따라가며 이름이 바뀌는 리포지토리 경로를 수집
    path = [name]
    current = mapping[name]
    while current in mapping and current not in path:
        path.append(current)
        current = mapping[current]
    return path


def check_chains(mapping: dict[str, str]) -> None:
    """
    처리할 수 없는 충돌 체인이 있는지 확인하는 함수

    두 리포지토리 사이의 체인(x → y, y → z 또는 x ↔ y)만 지원합니다.

    Raises:
        ValueError: 세 개 이상의 리포지토리가 이어진 체인이 있는 경우
    """
    for name in mapping:
        path = _chain_from(name, mapping)
        if len(path) > 2:
            chain = " → ".join(path + [mapping[path[-1]]])
            raise ValueError(
                f"세 단계 이상의 이름 변경 체인은 지원하지 않습니다: {chain}"
            )


def resolve_renames(assessments: list[Assessment]) -> tuple[list[RenameStep], list[RenameStep]]:
    """
    충돌 체인을 해소한 이름 변경 목록을 계산하는 함수

    체인 A(x → y), B(y → z)는 (x, y), (y, x) 두 단계 쌍으로 대체되고,
    A와 B의 단순 변경은 목록에서 제외됩니다. z가 x가 아니면
    B의 최종 변경 (x, z)는 deferred로 돌려줍니다.
    나머지 리포지토리는 새 이름이 이미 다른 단계의 대상이 아닌 경우에만 추가됩니다.

    Args:
        assessments: 평가가 끝난 Assessment 목록

    Returns:
        tuple: (이름 변경 목록, 보류된 변경 목록)

    Raises:
        ValueError: 세 개 이상의 리포지토리가 이어진 체인이 있는 경우
    """
    mapping = rename_mapping(assessments)
    check_chains(mapping)

    steps: list[RenameStep] = []
    deferred: list[RenameStep] = []
    handled: set[str] = set()

    for name, new_name in mapping.items():
        if name in handled or new_name in handled or new_name not in mapping:
            continue

        final_name = mapping[new_name]
        steps.append((name, new_name))
        steps.append((new_name, name))
        handled.update((name, new_name))

        if final_name != name:
            deferred.append((name, final_name))

    targets = {new for _, new in steps}
    for name, new_name in mapping.items():
        if name in handled or new_name in targets:
            continue
        steps.append((name, new_name))
        targets.add(new_name)

    return list(dict.fromkeys(steps)), deferred


def build_rename_plan(org: str, assessments: list[Assessment]) -> RenamePlan:
    renames, deferred = resolve_renames(assessments)
    return RenamePlan(org=org, renames=renames, deferred=deferred)


def write_rename_plan(plan: RenamePlan, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(plan.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")


def load_rename_plan(path: Path) -> RenamePlan:
    """
    이름 변경 계획 파일을 읽는 함수

    Raises:
        FileNotFoundError: 파일이 없는 경우
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"이름 변경 계획 파일을 찾을 수 없습니다: {path}")

    with open(path, "r", encoding="utf-8") as f:
        return RenamePlan.from_dict(json.load(f))
