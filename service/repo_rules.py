"""
Organization 리포지토리 감사 규칙 목록

규칙의 순서가 결과에 영향을 줍니다.
- 밑줄 → 대시 변환은 gem 이름 변경과 namespace 접두사보다 먼저 실행됩니다.
- namespace 접두사는 이름 정규화(밑줄, gem 이름)가 끝난 뒤에 붙습니다.
- 소문자 변환은 항상 마지막입니다.
"""

import re
from datetime import datetime, timedelta

from service.recommendations import Recommendation
from service.rules import (
    Describe,
    Downcase,
    Fork,
    GemRepoRename,
    LastUpdated,
    Legacy,
    Namespace,
    PatternMatch,
    ReallyOld,
    Rename,
    Rule,
)

# 이 기간 동안 push가 없으면 archive 권고
DEFAULT_MAX_AGE = timedelta(days=2 * 365)

# gem 리포지토리 이름 접두사
GEM_PREFIX = "goodguide"

# 개별 리포지토리 이름 변경 (정확히 일치하는 이름만)
EXPLICIT_RENAMES: dict[str, str] = {
    "platform": "purview-www",
    "platform-api": "purview-api",
    "admin": "purview-admin",
}

# namespace 접두사: (패턴, namespace)
NAMESPACES: list[tuple[str, str]] = [
    (r"^(?:chef|cookbook)-", "ops"),
    (r"^(?:terraform|ansible)(?:-|$)", "ops"),
    (r"^(?:ios|android)(?:-|$)", "mobile"),
]


def build_default_rules(
    now: datetime | None = None, max_age: timedelta = DEFAULT_MAX_AGE
) -> list[Rule]:
    """
    기본 규칙 목록을 생성하는 함수

    Args:
        now: 기준 시각 (None이면 현재 시각, 테스트에서 고정할 때 사용)
        max_age: archive 권고 기준 기간

    Returns:
        list[Rule]: 순서가 정해진 규칙 목록
    """
    rules: list[Rule] = [
        LastUpdated(now=now),
        Describe(),
        Fork(),
        Rename(r"_", "-", replace_all=True),
    ]

    for name, new_name in EXPLICIT_RENAMES.items():
        rules.append(Rename(rf"^{re.escape(name)}$", new_name))

    rules += [
        ReallyOld(max_age, now=now),
        Legacy(),
        PatternMatch(
            name_pattern=r"^(?:test|tmp|sandbox|scratch|playground)(?:-|_|$)",
            observation="Looks like a scratch repository",
            recommendation=Recommendation.MORE_EVALUATION_REQUIRED,
        ),
        PatternMatch(
            description_pattern=r"(?i)\bdeprecated\b",
            recommendation=Recommendation.SAFE_TO_ARCHIVE,
        ),
        PatternMatch(
            name_pattern=r"\.github\.io$",
            observation="GitHub Pages site",
            recommendation=Recommendation.KEEP,
        ),
        PatternMatch(
            name_pattern=r"(?:^|-|_)secrets?$",
            recommendation="Verify no credentials are committed, then make private",
        ),
        GemRepoRename(rf"^(?:{GEM_PREFIX}-)?(.+?)(?:-gem)?$", rf"{GEM_PREFIX}-\1-gem"),
    ]

    for pattern, namespace in NAMESPACES:
        rules.append(Namespace(pattern, namespace))

    rules.append(Downcase())
    return rules
