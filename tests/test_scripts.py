"""
운영 스크립트(감사, 클론 동기화, 이름 변경 적용) 테스트
"""

import json
import sys
from unittest.mock import MagicMock, patch

import pytest
from github import GithubException

from scripts.repo_admin import apply_renames, audit_repos, common, fetch_snapshot, sync_clones
from service.github import Snapshot, save_snapshot
from service.renames import RenamePlan, write_rename_plan
from service.repo_rules import build_default_rules
from service.rules import Rename


@pytest.fixture
def snapshot(make_record):
    return Snapshot(
        org="goodguide",
        fetched_at=None,
        records=[
            make_record(
                "accounts_gem",
                days_ago=4 * 365,
                root_files=frozenset({"accounts.gemspec"}),
            ),
            make_record("billing"),
            make_record("platform"),
        ],
    )


def test_audit(snapshot, now):
    """감사 결과로 보고서와 이름 변경 계획이 만들어지는지 테스트"""
    result = audit_repos.audit(snapshot, build_default_rules(now=now), now)

    assert not result.validation.failed
    assert result.plan.org == "goodguide"
    assert result.plan.renames == [
        ("accounts_gem", "goodguide-accounts-gem"),
        ("platform", "purview-www"),
    ]
    assert "## [platform](https://github.com/goodguide/platform) → `purview-www`" in result.report


def test_audit_reports_deferred_rename(make_record, now):
    snapshot = Snapshot(
        org="goodguide",
        fetched_at=None,
        records=[make_record("web"), make_record("www")],
    )
    # 규칙은 누적 적용되므로 www 변경 규칙을 먼저 둠
    rules = [Rename(r"^www$", "www-legacy"), Rename(r"^web$", "www")]

    result = audit_repos.audit(snapshot, rules, now)

    assert result.plan.renames == [("web", "www"), ("www", "web")]
    assert result.plan.deferred == [("web", "www-legacy")]
    assert "보류된 이름 변경: web → www-legacy" in result.report


def test_audit_validation_failure(make_record, now):
    snapshot = Snapshot(org="goodguide", fetched_at=None, records=[make_record("api")])

    result = audit_repos.audit(snapshot, [Rename(r"^api$", "api service")], now)

    assert result.validation.failed
    assert result.report == ""
    assert result.plan.renames == []


def test_audit_main_writes_outputs(snapshot, tmp_path, monkeypatch):
    snapshot_path = tmp_path / "snapshot.json"
    save_snapshot(snapshot_path, snapshot.org, snapshot.records, snapshot.records[0].pushed_at)
    prefix = tmp_path / "reports" / "audit"
    monkeypatch.setattr(sys, "argv", ["audit_repos.py", str(snapshot_path), str(prefix)])

    audit_repos.main()

    report = (tmp_path / "reports" / "audit.md").read_text(encoding="utf-8")
    plan = json.loads((tmp_path / "reports" / "audit-renames.json").read_text(encoding="utf-8"))
    assert report.startswith("# goodguide repository audit")
    assert plan["org"] == "goodguide"
    assert ["platform", "purview-www"] in plan["renames"]


def test_audit_main_requires_output_prefix(tmp_path, monkeypatch):
    """출력 접두사 인자가 없으면 0이 아닌 코드로 종료"""
    monkeypatch.setattr(sys, "argv", ["audit_repos.py", str(tmp_path / "snapshot.json")])

    with pytest.raises(SystemExit) as exc_info:
        audit_repos.main()

    assert exc_info.value.code != 0


def test_audit_main_missing_snapshot(tmp_path, monkeypatch):
    monkeypatch.setattr(
        sys, "argv", ["audit_repos.py", str(tmp_path / "missing.json"), str(tmp_path / "out")]
    )

    with pytest.raises(SystemExit) as exc_info:
        audit_repos.main()

    assert exc_info.value.code == 1
    assert not (tmp_path / "out.md").exists()


def test_audit_main_aborts_on_unsupported_chain(make_record, tmp_path, monkeypatch):
    """지원하지 않는 이름 변경 체인이 있으면 파일을 쓰지 않고 종료"""
    snapshot_path = tmp_path / "snapshot.json"
    records = [make_record("a"), make_record("b"), make_record("c")]
    save_snapshot(snapshot_path, "goodguide", records, records[0].pushed_at)
    rules = [Rename(r"^c$", "d"), Rename(r"^b$", "c"), Rename(r"^a$", "b")]
    monkeypatch.setattr(sys, "argv", ["audit_repos.py", str(snapshot_path), str(tmp_path / "out")])

    with patch.object(audit_repos, "build_default_rules", return_value=rules):
        with pytest.raises(SystemExit) as exc_info:
            audit_repos.main()

    assert exc_info.value.code == 1
    assert not (tmp_path / "out.md").exists()
    assert not (tmp_path / "out-renames.json").exists()


def test_sync_repository_clones_missing(make_record, tmp_path):
    record = make_record("billing")

    with patch.object(sync_clones, "git") as mock_git:
        action = sync_clones.sync_repository(record, tmp_path, use_ssh=False, dry_run=False)

    assert action == "clone"
    mock_git.clone.assert_called_once_with(record.clone_url, tmp_path / "billing")


def test_sync_repository_pulls_existing(make_record, tmp_path):
    (tmp_path / "billing").mkdir()

    with patch.object(sync_clones, "git") as mock_git:
        mock_git.is_git_repo.return_value = True
        action = sync_clones.sync_repository(
            make_record("billing"), tmp_path, use_ssh=True, dry_run=False
        )

    assert action == "pull"
    mock_git.pull.assert_called_once_with(tmp_path / "billing")
    mock_git.clone.assert_not_called()


def test_sync_repository_skips_non_git_directory(make_record, tmp_path):
    (tmp_path / "billing").mkdir()

    action = sync_clones.sync_repository(
        make_record("billing"), tmp_path, use_ssh=False, dry_run=False
    )

    assert action == "skip"


def test_sync_repository_dry_run(make_record, tmp_path):
    with patch.object(sync_clones, "git") as mock_git:
        action = sync_clones.sync_repository(
            make_record("billing"), tmp_path, use_ssh=True, dry_run=True
        )

    assert action == "clone"
    mock_git.clone.assert_not_called()


def make_clone(dest, name):
    path = dest / name
    path.mkdir()
    (path / "NAME").write_text(name, encoding="utf-8")
    return path


def test_apply_renames_swaps_directories(tmp_path):
    """(x, y), (y, x) 계획으로 두 디렉토리가 서로 이름을 바꾸는지 테스트"""
    make_clone(tmp_path, "x")
    make_clone(tmp_path, "y")
    plan = RenamePlan(org="goodguide", renames=[("x", "y"), ("y", "x")])

    success, skip, error = apply_renames.apply_renames(plan, tmp_path)

    assert (success, skip, error) == (2, 0, 0)
    assert (tmp_path / "y" / "NAME").read_text(encoding="utf-8") == "x"
    assert (tmp_path / "x" / "NAME").read_text(encoding="utf-8") == "y"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["x", "y"]


def test_apply_renames_updates_remote(tmp_path):
    path = make_clone(tmp_path, "platform")
    (path / ".git").mkdir()
    plan = RenamePlan(org="goodguide", renames=[("platform", "purview-www")])

    with patch.object(apply_renames, "git") as mock_git:
        mock_git.is_git_repo.return_value = True
        mock_git.get_remote_url.return_value = "git@github.com:goodguide/platform.git"
        mock_git.renamed_remote_url.return_value = "git@github.com:goodguide/purview-www.git"
        apply_renames.apply_renames(plan, tmp_path)

    mock_git.renamed_remote_url.assert_called_once_with(
        "git@github.com:goodguide/platform.git", "platform", "purview-www"
    )
    mock_git.set_remote_url.assert_called_once_with(
        tmp_path / "purview-www", "git@github.com:goodguide/purview-www.git"
    )


def test_apply_renames_skips_missing_and_dry_run(tmp_path):
    make_clone(tmp_path, "platform")
    plan = RenamePlan(org="goodguide", renames=[("platform", "purview-www"), ("gone", "new")])

    success, skip, error = apply_renames.apply_renames(plan, tmp_path, dry_run=True)

    assert (success, skip, error) == (1, 1, 0)
    assert (tmp_path / "platform").exists()
    assert not (tmp_path / "purview-www").exists()


def test_apply_renames_existing_target_is_error(tmp_path):
    make_clone(tmp_path, "platform")
    make_clone(tmp_path, "purview-www")
    plan = RenamePlan(org="goodguide", renames=[("platform", "purview-www")])

    success, skip, error = apply_renames.apply_renames(plan, tmp_path)

    assert (success, skip, error) == (0, 0, 1)
    assert (tmp_path / "platform" / "NAME").read_text(encoding="utf-8") == "platform"
    assert (tmp_path / "purview-www" / "NAME").read_text(encoding="utf-8") == "purview-www"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["platform", "purview-www"]


def test_apply_renames_existing_target_blocks_dependent_step(tmp_path):
    """막힌 단계의 원본을 대상으로 하는 단계도 옮기지 않는지 테스트"""
    make_clone(tmp_path, "x")
    make_clone(tmp_path, "y")
    make_clone(tmp_path, "z")
    plan = RenamePlan(org="goodguide", renames=[("x", "y"), ("y", "z")])

    success, skip, error = apply_renames.apply_renames(plan, tmp_path)

    assert (success, skip, error) == (0, 0, 2)
    for name in ["x", "y", "z"]:
        assert (tmp_path / name / "NAME").read_text(encoding="utf-8") == name
    assert sorted(p.name for p in tmp_path.iterdir()) == ["x", "y", "z"]


def test_apply_renames_existing_target_in_dry_run(tmp_path):
    make_clone(tmp_path, "platform")
    make_clone(tmp_path, "purview-www")
    plan = RenamePlan(org="goodguide", renames=[("platform", "purview-www")])

    assert apply_renames.apply_renames(plan, tmp_path, dry_run=True) == (0, 0, 1)


def test_apply_renames_restores_directory_when_remote_update_fails(tmp_path):
    """remote 변경이 실패하면 디렉토리를 원래 이름으로 되돌리는지 테스트"""
    path = make_clone(tmp_path, "platform")
    (path / ".git").mkdir()
    plan = RenamePlan(org="goodguide", renames=[("platform", "purview-www")])

    with patch.object(apply_renames, "git") as mock_git:
        mock_git.is_git_repo.return_value = True
        mock_git.get_remote_url.side_effect = RuntimeError("git remote get-url origin 실패")
        success, skip, error = apply_renames.apply_renames(plan, tmp_path)

    assert (success, skip, error) == (0, 0, 1)
    assert (tmp_path / "platform" / "NAME").read_text(encoding="utf-8") == "platform"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["platform"]


def test_apply_renames_rejects_duplicate_sources(tmp_path):
    plan = RenamePlan(org="goodguide", renames=[("x", "y"), ("x", "z")])

    with pytest.raises(ValueError):
        apply_renames.apply_renames(plan, tmp_path)


def test_apply_renames_main_reads_plan(tmp_path, monkeypatch):
    clones = tmp_path / "clones"
    clones.mkdir()
    make_clone(clones, "platform")
    plan_path = tmp_path / "audit-renames.json"
    write_rename_plan(RenamePlan(org="goodguide", renames=[("platform", "purview-www")]), plan_path)
    monkeypatch.setattr(sys, "argv", ["apply_renames.py", str(plan_path), str(clones)])

    apply_renames.main()

    assert (clones / "purview-www" / "NAME").read_text(encoding="utf-8") == "platform"


def test_fetch_records_continues_after_error(make_record):
    """리포지토리 하나의 조회 실패가 전체를 중단하지 않는지 테스트"""
    org = MagicMock()
    repos = []
    for name in ["Zeta", "alpha", "broken"]:
        repo = MagicMock(fork=False, archived=False)
        repo.name = name
        repos.append(repo)
    org.get_repos.return_value = repos
    error = GithubException(500, {"message": "Server Error"}, None)

    with patch.object(
        fetch_snapshot,
        "build_repository_record",
        side_effect=[make_record("Zeta"), make_record("alpha"), error],
    ):
        records, error_count = fetch_snapshot.fetch_records(org)

    assert [record.name for record in records] == ["alpha", "Zeta"]
    assert error_count == 1


def test_get_all_repos_filters_archived():
    org = MagicMock()
    active = MagicMock(fork=True, archived=False)
    archived = MagicMock(fork=False, archived=True)
    org.get_repos.return_value = [active, archived]

    assert list(common.get_all_repos(org)) == [active]
    assert list(common.get_all_repos(org, include_forks=False, include_archived=True)) == [archived]


def test_get_org_name(monkeypatch):
    monkeypatch.setenv("GITHUB_ORG_NAME", "goodguide")

    assert common.get_org_name() == "goodguide"
    assert common.get_org_name("other") == "other"

    monkeypatch.delenv("GITHUB_ORG_NAME")
    with pytest.raises(ValueError):
        common.get_org_name()


def test_get_github_client_requires_token(monkeypatch):
    monkeypatch.delenv("GITHUB_ADMIN_TOKEN", raising=False)

    with pytest.raises(ValueError):
        common.get_github_client()
