"""
Twingate Action
CI 파이프라인 잡에서 Twingate VPN 터널을 설치/연결하고 잡 종료 시 정리하는 액션

Features:
- Linux(apt) / Windows(msi) 클라이언트 자동 설치
- 서비스 키 기반 headless 설정
- 상태 폴링 및 점진적 대기 재시도
- 환경 변수 기반 setup → cleanup 상태 전달
- 항상 실패하지 않는 best-effort 정리
"""

__version__ = "1.0.0"
__author__ = "DevOps Team"
