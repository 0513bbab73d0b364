"""
감사 보고서(markdown) 생성 서비스
"""

from datetime import datetime
from pathlib import Path

from tabulate import tabulate

from service.recommendations import recommendation_lines
from service.repository import Assessment


def heading_line(assessment: Assessment) -> str:
    """
    리포지토리 섹션 제목을 생성하는 함수

    Args:
        assessment: 평가 결과

    Returns:
        str: "## [name](url)" 형식의 제목 (이름 변경 시 "→ `새 이름`" 추가)
    """
    record = assessment.record
    title = f"[{record.name}]({record.url})" if record.url else record.name
    line = f"## {title}"
    if record.is_private:
        line += " (private)"
    if assessment.renamed:
        line += f" → `{assessment.proposed_name}`"
    return line


def render_repository(assessment: Assessment) -> list[str]:
    lines = [heading_line(assessment), ""]
    for observation in assessment.observations:
        lines.append(f"- {observation}")

    recommendations = recommendation_lines(assessment)
    if recommendations:
        if assessment.observations:
            lines.append("")
        lines.append("**Recommendation:**")
        lines.append("")
        for recommendation in recommendations:
            lines.append(f"- {recommendation}")

    lines.append("")
    return lines


def render_summary_table(assessments: list[Assessment]) -> str:
    headers = ["Repository", "Proposed name", "Recommendation"]
    table_data = []
    for assessment in assessments:
        table_data.append(
            [
                assessment.name,
                assessment.proposed_name if assessment.renamed else "",
                " / ".join(recommendation_lines(assessment)),
            ]
        )
    return tabulate(table_data, headers=headers, tablefmt="github")


def render_report(
    org: str,
    assessments: list[Assessment],
    generated_at: datetime,
    warnings: list[str] | None = None,
) -> str:
    """
    전체 감사 보고서를 markdown 문자열로 생성하는 함수

    파일을 쓰기 전에 전체 내용을 메모리에서 만들기 때문에,
    처리할 수 없는 권고 태그가 있으면 아무 파일도 쓰지 않고 실패합니다.

    Args:
        org: Organization 이름
        assessments: 평가 결과 목록
        generated_at: 생성 시각
        warnings: 보고서에 함께 남길 경고 목록

    Returns:
        str: markdown 보고서
    """
    lines = [
        f"# {org} repository audit",
        "",
        f"Generated at {generated_at.strftime('%Y-%m-%d %H:%M %Z').strip()}, "
        f"{len(assessments)} repositories.",
        "",
    ]

    if warnings:
        lines.append("## Warnings")
        lines.append("")
        for warning in warnings:
            lines.append(f"- {warning}")
        lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append(render_summary_table(assessments))
    lines.append("")

    for assessment in assessments:
        lines.extend(render_repository(assessment))

    return "\n".join(lines)


def write_report(content: str, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
