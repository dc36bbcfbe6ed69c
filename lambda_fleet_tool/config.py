# lambda_fleet_tool/config.py
"""
Configuration management for lambda-fleet-tool

Values resolve in order: command line flag, environment (optionally
loaded from a .env file), built-in default.
"""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .planner import parse_include

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = 'default'
DEFAULT_REGION = 'us-east-2'


def load_environment(env_path: Path = Path('.env')) -> bool:
    """Load a .env file into os.environ if it exists"""
    if env_path.exists():
        load_dotenv(env_path, override=True)
        return True
    return False


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"⚠️  Ignoring non-numeric {name}={value!r}")
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


def _default_profile() -> str:
    return os.getenv('AWS_PROFILE') or DEFAULT_PROFILE


def _default_region() -> str:
    return os.getenv('AWS_REGION') or os.getenv('AWS_DEFAULT_REGION') or DEFAULT_REGION


@dataclass
class ToolConfig:
    """Settings shared by every command"""

    profile: str = field(default_factory=_default_profile)
    region: str = field(default_factory=_default_region)
    verbose: bool = False
    log_file: Optional[Path] = None

    @classmethod
    def from_args(cls, args) -> 'ToolConfig':
        log_file = getattr(args, 'log_file', None)
        return cls(
            profile=getattr(args, 'profile', None) or _default_profile(),
            region=getattr(args, 'region', None) or _default_region(),
            verbose=bool(getattr(args, 'verbose', False)),
            log_file=Path(log_file) if log_file else None,
        )


@dataclass
class UpgradeConfig:
    """Settings for one runtime upgrade run"""

    target_runtime: str
    select_all: bool = False
    include: List[str] = field(default_factory=list)
    layer_arn: Optional[str] = None
    assume_yes: bool = False
    dry_run: bool = False
    report_file: Optional[Path] = None
    poll_timeout: float = field(default_factory=lambda: _env_float('LAMBDA_TOOL_POLL_TIMEOUT', 60.0))
    poll_initial_interval: float = 1.0
    poll_max_interval: float = 5.0
    poll_backoff: float = 1.5
    lookup_workers: int = field(default_factory=lambda: _env_int('LAMBDA_TOOL_LOOKUP_WORKERS', 10))

    @property
    def interactive(self) -> bool:
        return not self.select_all and not self.include

    @classmethod
    def from_args(cls, args) -> 'UpgradeConfig':
        config = cls(
            target_runtime=args.target_runtime,
            select_all=bool(getattr(args, 'all', False)),
            include=parse_include(getattr(args, 'include', None)),
            layer_arn=getattr(args, 'layer', None) or None,
            assume_yes=bool(getattr(args, 'yes', False)),
            dry_run=bool(getattr(args, 'dry_run', False)),
            report_file=Path(args.report_file) if getattr(args, 'report_file', None) else None,
        )
        timeout = getattr(args, 'timeout', None)
        if timeout is not None:
            config.poll_timeout = float(timeout)
        return config
