"""
CLI 메인 인터페이스
Click 및 Rich 기반 setup / cleanup 진입점
"""

import sys
import click
from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from . import __version__
from .actions import get_input, get_flag_input
from .cleanup import CleanupManager
from .config import ActionInputs, Config
from .errors import TwingateActionError
from .logger import init_logger, get_logger
from .provision import SetupController
from .runner import CommandRunner
from .state import FlagStore

console = Console()


def show_summary(controller: SetupController):
    """실행 결과 요약 표시"""
    if not controller.execution_log:
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("단계", style="cyan", width=20)
    table.add_column("상태", width=6)
    table.add_column("메시지")

    for log in controller.execution_log:
        status_icon = "✓" if log["status"] == "success" else "✗"
        status_color = "green" if log["status"] == "success" else "red"
        table.add_row(
            log["step"],
            f"[{status_color}]{status_icon}[/{status_color}]",
            log["message"] or ""
        )

    console.print(table)

    log_files = get_logger().get_log_files()
    if log_files["main_log"]:
        console.print(f"\n[bold]로그 파일:[/bold]")
        console.print(f"  Main: {log_files['main_log']}")
        console.print(f"  Error: {log_files['error_log']}")


def resolve_inputs(service_key: Optional[str], auto_cleanup: Optional[bool]) -> ActionInputs:
    """CLI 옵션이 없으면 러너 입력(INPUT_*) 사용"""
    if service_key is None:
        service_key = get_input("service-key", required=True)
    if auto_cleanup is None:
        auto_cleanup = get_flag_input("auto-cleanup")
    return ActionInputs(service_key=service_key, auto_cleanup=auto_cleanup)


def _load(config_path: Optional[str], debug: bool) -> Config:
    cfg = Config(config_path)
    init_logger(cfg.logging.log_dir, cfg.logging.log_level, debug)
    return cfg


@click.group()
@click.version_option(version=__version__)
def cli():
    """Twingate Action

    CI 잡에서 Twingate 터널을 연결하고 잡 종료 시 정리합니다.
    """
    pass


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='설정 파일 경로')
@click.option('--service-key', help='서비스 키 내용 (기본값: INPUT_SERVICE-KEY)')
@click.option('--auto-cleanup/--no-auto-cleanup', default=None,
              help='cleanup 단계 활성화 (기본값: INPUT_AUTO-CLEANUP)')
@click.option('--debug', is_flag=True, help='디버그 모드')
def setup(config_path, service_key, auto_cleanup, debug):
    """Twingate 설치 및 연결"""
    console.print(Panel.fit(
        "[bold cyan]Twingate Action[/bold cyan]\n"
        "Twingate 클라이언트를 설치하고 터널을 연결합니다.",
        border_style="cyan"
    ))

    controller = None
    try:
        cfg = _load(config_path, debug)
        inputs = resolve_inputs(service_key, auto_cleanup)

        controller = SetupController(CommandRunner(debug), FlagStore(), cfg)
        controller.run(inputs)
    except TwingateActionError as e:
        get_logger().error(f"Action failed: {e}")
        if controller:
            show_summary(controller)
        sys.exit(1)
    except Exception as e:
        get_logger().exception(f"Action failed: {e}")
        sys.exit(1)

    show_summary(controller)
    console.print("[bold green]✓ Twingate 연결 완료[/bold green]")


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(), help='설정 파일 경로')
@click.option('--debug', is_flag=True, help='디버그 모드')
def cleanup(config_path, debug):
    """Twingate 연결 정리 (항상 종료 코드 0)"""
    try:
        cfg = _load(config_path, debug)
        CleanupManager(CommandRunner(debug), FlagStore(), cfg).run()
    except Exception as e:
        get_logger().warning(f"Cleanup encountered an issue: {e}")


@cli.command()
@click.argument('output', type=click.Path(), default='./twingate-action.yaml')
def init(output):
    """샘플 설정 파일 생성"""
    Config().create_sample(output)
    console.print(f"[green]✓ 샘플 설정 파일 생성: {output}[/green]")
    console.print(f"[cyan]  twingate-action setup --config {output}[/cyan]")


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='설정 파일 경로')
def validate(config_path):
    """설정 파일 유효성 검사"""
    try:
        cfg = Config(config_path)
    except Exception as e:
        console.print(f"[red]✗ 설정 파일 오류: {str(e)}[/red]")
        sys.exit(1)

    console.print("[green]✓ 설정 파일이 유효합니다.[/green]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("항목", style="cyan")
    table.add_column("값")

    table.add_row("설정 파일", cfg.config_path or "(기본값)")
    table.add_row("최대 재시도", str(cfg.retry.max_retries))
    table.add_row("대기 시간", f"{cfg.retry.initial_wait}s + {cfg.retry.wait_increment}s/회")
    table.add_row("터널 인터페이스", cfg.client.interface_pattern)
    table.add_row("로그 디렉토리", cfg.logging.log_dir or "(콘솔)")

    console.print(table)


def main():
    """메인 엔트리 포인트"""
    cli()


if __name__ == '__main__':
    main()
