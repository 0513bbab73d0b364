"""
GitHub Organization 리포지토리 정리 스크립트 모음

Organization의 리포지토리 목록을 스냅샷으로 저장하고, 규칙에 따라 감사한 뒤
이름 변경 계획과 보고서를 만듭니다.
패키지 이름이 repo_admin인 이유: PyGithub의 github 패키지와 이름 충돌을 방지하기 위함.

스크립트 목록:
- fetch_snapshot.py: Organization 리포지토리 메타데이터를 JSON 스냅샷으로 저장
- sync_clones.py: 스냅샷의 모든 리포지토리를 로컬에 clone 또는 pull
- audit_repos.py: 스냅샷을 규칙으로 감사하여 markdown 보고서와 이름 변경 계획 생성
- apply_renames.py: 이름 변경 계획을 로컬 클론 디렉토리와 remote URL에 적용

사용 전 필수 환경변수 (fetch_snapshot.py):
- GITHUB_ADMIN_TOKEN: GitHub Personal Access Token
- GITHUB_ORG_NAME: 대상 Organization 이름

변경을 수행하는 스크립트는 --dry-run 옵션을 지원합니다.
"""
