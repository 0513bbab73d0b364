"""
리포지토리 감사 규칙

각 규칙은 Assessment를 검사(matches)하고, 조건을 만족하면(visit)
관찰 내용, 권고 태그를 추가하거나 제안 이름(proposed_name)을 변경합니다.
규칙은 정해진 순서대로 적용되며, 뒤의 규칙은 앞 규칙이 바꾼 이름을 봅니다.
"""

import fnmatch
import re
from datetime import datetime, timedelta, timezone

from service.recommendations import Recommendation, parse_recommendation
from service.repository import Assessment


def compile_pattern(pattern: "str | re.Pattern") -> re.Pattern:
    """
    문자열 또는 컴파일된 정규식을 re.Pattern으로 변환하는 함수

    Raises:
        ValueError: 정규식 문법이 잘못된 경우
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"잘못된 정규식입니다: {pattern!r} ({e})") from e


def time_ago(then: datetime, now: datetime) -> str:
    """
    경과 시간을 "4 years" 같은 영어 문구로 변환하는 함수

    Args:
        then: 과거 시각
        now: 기준 시각

    Returns:
        str: 가장 큰 단위 하나로 표현한 경과 시간
    """
    seconds = max(0, int((now - then).total_seconds()))
    units = [
        ("year", 365 * 24 * 3600),
        ("month", 30 * 24 * 3600),
        ("day", 24 * 3600),
        ("hour", 3600),
        ("minute", 60),
    ]
    for unit, size in units:
        count = seconds // size
        if count:
            return f"{count} {unit}{'s' if count > 1 else ''}"
    return "less than a minute"


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # 스냅샷의 시각에 타임존이 없으면 UTC로 간주
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Rule:
    """
    규칙 기본 클래스

    하위 클래스는 matches()와 apply()를 구현합니다.
    """

    def matches(self, assessment: Assessment) -> bool:
        raise NotImplementedError

    def apply(self, assessment: Assessment) -> None:
        raise NotImplementedError

    def visit(self, assessment: Assessment) -> bool:
        """
        규칙을 적용하는 함수

        Args:
            assessment: 누적 평가 결과

        Returns:
            bool: 규칙이 적용되었으면 True, 조건을 만족하지 않으면 False
        """
        if not self.matches(assessment):
            return False
        self.apply(assessment)
        return True

    def __repr__(self):
        return f"{type(self).__name__}()"


class LastUpdated(Rule):
    """마지막 커밋 시각과 커밋한 사람을 관찰 내용으로 남김"""

    def __init__(self, now: datetime | None = None):
        self.now = now

    def matches(self, assessment: Assessment) -> bool:
        return True

    def apply(self, assessment: Assessment) -> None:
        commit = assessment.record.last_commit
        if commit is None:
            assessment.observations.append("No commits found")
            return

        ago = time_ago(_aware(commit.date), _now(self.now))
        text = f"Last updated {ago} ago by {commit.committer}"
        if commit.url:
            text += f" ([commit]({commit.url}))"
        assessment.observations.append(text)


class Describe(Rule):
    def matches(self, assessment: Assessment) -> bool:
        description = assessment.record.description
        return bool(description and description.strip())

    def apply(self, assessment: Assessment) -> None:
        assessment.observations.append(assessment.record.description.strip())


class ReallyOld(Rule):
    """마지막 활동이 max_age보다 오래된 리포지토리에 archive 권고"""

    def __init__(self, max_age: timedelta, now: datetime | None = None):
        self.max_age = max_age
        self.now = now

    def matches(self, assessment: Assessment) -> bool:
        last_activity = assessment.record.last_activity
        if last_activity is None:
            return False
        return _aware(last_activity) < _now(self.now) - self.max_age

    def apply(self, assessment: Assessment) -> None:
        assessment.recommendations.append(Recommendation.ARCHIVE)

    def __repr__(self):
        return f"ReallyOld(max_age={self.max_age!r})"


class Legacy(Rule):
    """
    legacy 리포지토리에 archive 권고

    이름이 "legacy-"로 시작하거나, 설명에 "legacy"가 있고 "in use"가 없는 경우입니다.
    """

    def matches(self, assessment: Assessment) -> bool:
        if assessment.proposed_name.startswith("legacy-"):
            return True
        description = (assessment.record.description or "").lower()
        return "legacy" in description and "in use" not in description

    def apply(self, assessment: Assessment) -> None:
        assessment.recommendations.append(Recommendation.ARCHIVE)


class Fork(Rule):
    def matches(self, assessment: Assessment) -> bool:
        return assessment.record.is_fork

    def apply(self, assessment: Assessment) -> None:
        record = assessment.record
        parent = record.parent or "unknown parent"
        if record.parent_url:
            parent = f"[{parent}]({record.parent_url})"
        assessment.observations.append(f"Fork of {parent}")
        assessment.recommendations.append(Recommendation.EVALUATE_FORK_FOR_DELETION)


class PatternMatch(Rule):
    """
    이름 또는 설명이 정규식과 일치하면 설정된 관찰 내용/권고를 추가하는 규칙

    기본은 OR 조건(둘 중 하나만 일치해도 적용)이며,
    match_all=True이면 지정한 패턴이 모두 일치해야 합니다.
    """

    def __init__(
        self,
        name_pattern: "str | re.Pattern | None" = None,
        description_pattern: "str | re.Pattern | None" = None,
        recommendation=None,
        observation: str | None = None,
        match_all: bool = False,
    ):
        if name_pattern is None and description_pattern is None:
            raise ValueError("PatternMatch에는 name_pattern 또는 description_pattern이 필요합니다.")
        if recommendation is None and observation is None:
            raise ValueError("PatternMatch에는 recommendation 또는 observation이 필요합니다.")

        self.name_pattern = (
            compile_pattern(name_pattern) if name_pattern is not None else None
        )
        self.description_pattern = (
            compile_pattern(description_pattern)
            if description_pattern is not None
            else None
        )
        self.recommendation = (
            parse_recommendation(recommendation) if recommendation is not None else None
        )
        self.observation = observation
        self.match_all = match_all

    def matches(self, assessment: Assessment) -> bool:
        results = []
        if self.name_pattern is not None:
            results.append(bool(self.name_pattern.search(assessment.record.name)))
        if self.description_pattern is not None:
            description = assessment.record.description or ""
            results.append(bool(self.description_pattern.search(description)))
        return all(results) if self.match_all else any(results)

    def apply(self, assessment: Assessment) -> None:
        if self.observation is not None:
            assessment.observations.append(self.observation)
        if self.recommendation is not None:
            assessment.recommendations.append(self.recommendation)

    def __repr__(self):
        return (
            f"PatternMatch(name_pattern={self.name_pattern!r}, "
            f"description_pattern={self.description_pattern!r}, "
            f"recommendation={self.recommendation!r})"
        )


class Namespace(Rule):
    """제안 이름이 패턴과 일치하면 "{namespace}-" 접두사를 붙이는 규칙"""

    def __init__(self, name_pattern: "str | re.Pattern", namespace: str):
        self.name_pattern = compile_pattern(name_pattern)
        self.namespace = namespace

    @property
    def prefix(self) -> str:
        return f"{self.namespace}-"

    def matches(self, assessment: Assessment) -> bool:
        name = assessment.proposed_name
        if name.startswith(self.prefix):
            return False
        return bool(self.name_pattern.search(name))

    def apply(self, assessment: Assessment) -> None:
        assessment.proposed_name = self.prefix + assessment.proposed_name

    def __repr__(self):
        return f"Namespace({self.name_pattern.pattern!r}, {self.namespace!r})"


class Rename(Rule):
    """
    제안 이름에 정규식 치환을 적용하는 규칙

    replacement는 re.sub 문법(\\1, \\g<name>)을 따릅니다.
    replace_all=False이면 첫 번째 일치만 치환합니다.
    """

    def __init__(
        self,
        pattern: "str | re.Pattern",
        replacement: str,
        replace_all: bool = False,
    ):
        self.pattern = compile_pattern(pattern)
        self.replacement = replacement
        self.replace_all = replace_all

    def matches(self, assessment: Assessment) -> bool:
        return bool(self.pattern.search(assessment.proposed_name))

    def apply(self, assessment: Assessment) -> None:
        count = 0 if self.replace_all else 1
        assessment.proposed_name = self.pattern.sub(
            self.replacement, assessment.proposed_name, count=count
        )

    def __repr__(self):
        return f"{type(self).__name__}({self.pattern.pattern!r}, {self.replacement!r})"


class PackageRepoRename(Rename):
    """루트에 패키지 매니페스트 파일이 있는 리포지토리에만 적용되는 Rename"""

    def __init__(
        self,
        manifest_glob: str,
        pattern: "str | re.Pattern",
        replacement: str,
        replace_all: bool = False,
    ):
        super().__init__(pattern, replacement, replace_all=replace_all)
        self.manifest_glob = manifest_glob

    def has_manifest(self, assessment: Assessment) -> bool:
        return any(
            fnmatch.fnmatch(filename, self.manifest_glob)
            for filename in assessment.record.root_files
        )

    def matches(self, assessment: Assessment) -> bool:
        return self.has_manifest(assessment) and super().matches(assessment)


class GemRepoRename(PackageRepoRename):
    def __init__(
        self,
        pattern: "str | re.Pattern",
        replacement: str,
        replace_all: bool = False,
    ):
        super().__init__("*.gemspec", pattern, replacement, replace_all=replace_all)


class Downcase(Rule):
    def matches(self, assessment: Assessment) -> bool:
        return True

    def apply(self, assessment: Assessment) -> None:
        assessment.proposed_name = assessment.proposed_name.lower()
