"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging


logger = logging.getLogger(__name__)


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    repository: Optional[str] = None  # 'owner/repo'
    timeout_seconds: int = 30


@dataclass
class AnalysisConfig:
    """패턴 분석 설정"""
    file_extensions: List[str] = field(default_factory=lambda: [".cs"])
    step2_window: int = 30
    max_workers: int = 1


@dataclass
class ArtifactConfig:
    """아티팩트 및 스티키 코멘트 설정"""
    directory: str = "artifacts"
    sticky_marker: str = "<!-- Sticky Pull Request Comment -->"
    recreate_sticky: bool = True


@dataclass
class TestConfig:
    """테스트 실행 설정"""
    __test__ = False  # pytest 수집 제외

    command: str = "dotnet test --verbosity normal"
    working_directory: str = "."
    results_file: str = "test-results.txt"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig = field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)
    tests: TestConfig = field(default_factory=TestConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                repository=os.getenv("GITHUB_REPOSITORY"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            analysis=AnalysisConfig(
                file_extensions=_split_list(os.getenv("REVIEW_FILE_EXTENSIONS", ".cs")),
                step2_window=int(os.getenv("STEP2_WINDOW", "30")),
                max_workers=int(os.getenv("SCAN_WORKERS", "1")),
            ),
            artifacts=ArtifactConfig(
                directory=os.getenv("ARTIFACTS_DIR", "artifacts"),
                sticky_marker=os.getenv("STICKY_MARKER", "<!-- Sticky Pull Request Comment -->"),
                recreate_sticky=os.getenv("RECREATE_STICKY", "true").lower() == "true",
            ),
            tests=TestConfig(
                command=os.getenv("TEST_COMMAND", "dotnet test --verbosity normal"),
                working_directory=os.getenv("TEST_WORKDIR", "."),
                results_file=os.getenv("TEST_RESULTS_FILE", "test-results.txt"),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            github=GitHubConfig(**config_data.get('github', {})),
            analysis=AnalysisConfig(**config_data.get('analysis', {})),
            artifacts=ArtifactConfig(**config_data.get('artifacts', {})),
            tests=TestConfig(**config_data.get('tests', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 저장소 형식 확인
        if self.github.repository and '/' not in self.github.repository:
            errors.append("Repository must be in format 'owner/repo'")

        if self.github.timeout_seconds <= 0:
            errors.append("GitHub timeout must be positive")

        # 분석 설정 검증
        if not self.analysis.file_extensions:
            errors.append("At least one file extension is required")

        if self.analysis.step2_window <= 0:
            errors.append("STEP 2 window must be positive")

        if self.analysis.max_workers < 1:
            errors.append("Scan workers must be at least 1")

        if not self.tests.command.strip():
            errors.append("Test command cannot be empty")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'api_base_url': self.github.api_base_url,
                'repository': self.github.repository,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'analysis': {
                'file_extensions': list(self.analysis.file_extensions),
                'step2_window': self.analysis.step2_window,
                'max_workers': self.analysis.max_workers,
            },
            'artifacts': {
                'directory': self.artifacts.directory,
                'sticky_marker': self.artifacts.sticky_marker,
                'recreate_sticky': self.artifacts.recreate_sticky,
            },
            'tests': {
                'command': self.tests.command,
                'working_directory': self.tests.working_directory,
                'results_file': self.tests.results_file,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()
        logger.debug(f"Effective configuration: {self._config.to_dict()}")

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def _setup_logging(self) -> None:
        """로깅 설정"""
        level = logging.DEBUG if self._config.debug else getattr(logging, self._config.logging.level.upper())
        logging.basicConfig(
            level=level,
            format=self._config.logging.format,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            # 루트 로거에 핸들러 추가
            root_logger = logging.getLogger()
            root_logger.addHandler(handler)


# 전역 설정 관리자 인스턴스 (최초 사용 시 생성)
_config_manager: Optional[ConfigManager] = None


def get_config() -> AppConfig:
    """현재 설정 반환"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config
