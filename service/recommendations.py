"""
권고(Recommendation) 태그와 정제 로직

리포지토리에 누적된 권고 태그 중 보고서에 표시할 하나를 우선순위로 고릅니다.
태그는 Recommendation 열거형 멤버 또는 자유 텍스트(str)입니다.
"""

from enum import Enum

from service.repository import Assessment


class Recommendation(Enum):
    KEEP = "keep"
    MORE_EVALUATION_REQUIRED = "more_evaluation_required"
    SAFE_TO_ARCHIVE = "safe_to_archive"
    ARCHIVE = "archive"
    DELETE = "delete"
    EVALUATE_FORK_FOR_DELETION = "evaluate_fork_for_deletion"


RENAME_NOTICE = "Rename as indicated"

# 숫자가 작을수록 우선순위가 높음
NEUTRAL_PRIORITY = 3
PRIORITIES: dict[Recommendation, int] = {
    Recommendation.KEEP: 0,
    Recommendation.MORE_EVALUATION_REQUIRED: 1,
    Recommendation.SAFE_TO_ARCHIVE: 2,
    Recommendation.EVALUATE_FORK_FOR_DELETION: 4,
    Recommendation.DELETE: 5,
    Recommendation.ARCHIVE: 5,
}

# None은 표시하지 않음을 의미
DISPLAY_TEXT: dict[Recommendation, str | None] = {
    Recommendation.KEEP: None,
    Recommendation.MORE_EVALUATION_REQUIRED: "Investigate further",
    Recommendation.SAFE_TO_ARCHIVE: "Archive",
    Recommendation.ARCHIVE: "Archive",
    Recommendation.DELETE: "Delete or Archive",
    Recommendation.EVALUATE_FORK_FOR_DELETION: (
        "Fork; Investigate further and delete if not in use"
    ),
}


def parse_recommendation(value) -> "Recommendation | str":
    """
    설정값을 권고 태그로 변환하는 함수

    알려진 태그 이름이면 열거형 멤버로, 그 외의 문자열은 자유 텍스트로 유지합니다.

    Args:
        value: Recommendation 멤버 또는 문자열

    Returns:
        Recommendation | str: 변환된 태그
    """
    if isinstance(value, Recommendation):
        return value
    try:
        return Recommendation(value)
    except ValueError:
        return value


def priority(tag) -> int:
    if isinstance(tag, Recommendation):
        return PRIORITIES.get(tag, NEUTRAL_PRIORITY)
    return NEUTRAL_PRIORITY


def _sort_key(tag) -> tuple[int, str]:
    # 같은 우선순위 안에서는 태그 텍스트로 정렬해 입력 순서와 무관하게 만듦
    text = tag.value if isinstance(tag, Recommendation) else str(tag)
    return priority(tag), text


def sort_recommendations(tags) -> list:
    return sorted(dict.fromkeys(tags), key=_sort_key)


def distill(tags):
    """
    권고 태그 목록에서 표시할 태그 하나를 고르는 함수

    Args:
        tags: 권고 태그 목록 (중복 허용)

    Returns:
        Recommendation | str | None: 가장 우선순위가 높은 태그 (없으면 None)
    """
    ordered = sort_recommendations(tags)
    return ordered[0] if ordered else None


def display_text(tag) -> str | None:
    """
    권고 태그를 보고서 문구로 변환하는 함수

    Args:
        tag: 권고 태그

    Returns:
        str | None: 표시 문구 (keep은 None)

    Raises:
        ValueError: 처리할 수 없는 태그인 경우 (설정 오류)
    """
    if isinstance(tag, str):
        return tag
    if isinstance(tag, Recommendation) and tag in DISPLAY_TEXT:
        return DISPLAY_TEXT[tag]
    raise ValueError(f"처리할 수 없는 권고 태그입니다: {tag!r}")


def recommendation_lines(assessment: Assessment) -> list[str]:
    """
    보고서에 표시할 권고 문구 목록을 만드는 함수

    이름 변경이 제안된 경우 "Rename as indicated"가 먼저 오고,
    그 뒤에 정제된 권고 하나가 옵니다. 최대 두 줄입니다.

    Args:
        assessment: 평가가 끝난 Assessment

    Returns:
        list[str]: 표시할 권고 문구
    """
    lines = []
    if assessment.renamed:
        lines.append(RENAME_NOTICE)

    tag = distill(assessment.unique_recommendations())
    if tag is not None:
        text = display_text(tag)
        if text:
            lines.append(text)
    return lines
