#!/usr/bin/env python3
# lambda_fleet_tool/cli.py
"""
CLI interface for lambda-fleet-tool
"""
import logging
import sys
from pathlib import Path
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .apply import ApplyEngine
from .args import ToolArgumentParser
from .aws import create_session, error_message
from .aws.lambda_manager import LambdaManager
from .aws.logs_manager import LogsManager
from .config import ToolConfig, UpgradeConfig, load_environment
from .errors import LambdaToolError, OperatorCancelled
from .fetcher import FunctionFetcher
from .inventory import InventoryCollector
from .listing import FunctionLister
from .upgrader import RuntimeUpgrader
from .validators import AWSValidator, OptionsValidator

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for a CLI run"""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
    # botocore is chatty at DEBUG
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    return logging.getLogger(__name__)


def _collector(session, upgrade_config: Optional[UpgradeConfig] = None) -> InventoryCollector:
    workers = upgrade_config.lookup_workers if upgrade_config else 10
    return InventoryCollector(LambdaManager(session), LogsManager(session), max_workers=workers)


def run_upgrade(args, config: ToolConfig) -> int:
    upgrade_config = UpgradeConfig.from_args(args)
    OptionsValidator().validate(config.profile, config.region)
    session = create_session(config.profile, config.region)
    preflight = AWSValidator(session, config.profile).validate

    collector = _collector(session, upgrade_config)
    engine = ApplyEngine(
        collector.lambda_mgr,
        timeout=upgrade_config.poll_timeout,
        initial_interval=upgrade_config.poll_initial_interval,
        max_interval=upgrade_config.poll_max_interval,
        backoff=upgrade_config.poll_backoff,
    )
    upgrader = RuntimeUpgrader(upgrade_config, collector, engine, preflight=preflight)
    upgrader.run()
    # Partial failures are reported in the summary, not the exit code
    return 0


def run_list_functions(args, config: ToolConfig) -> int:
    OptionsValidator().validate(config.profile, config.region)
    session = create_session(config.profile, config.region)
    AWSValidator(session, config.profile).validate()
    FunctionLister(_collector(session)).list_functions(args.runtime)
    return 0


def run_list_layers(args, config: ToolConfig) -> int:
    OptionsValidator().validate(config.profile, config.region)
    session = create_session(config.profile, config.region)
    AWSValidator(session, config.profile).validate()
    FunctionLister(_collector(session)).list_functions_with_layers(args.runtime)
    return 0


def run_fetch(args, config: ToolConfig) -> int:
    OptionsValidator().validate(config.profile, config.region, function_name=args.function_name)
    session = create_session(config.profile, config.region)
    AWSValidator(session, config.profile).validate()
    FunctionFetcher(LambdaManager(session)).fetch(args.function_name, args.output)
    return 0


COMMANDS = {
    'upgrade': run_upgrade,
    'list-functions': run_list_functions,
    'list-layers': run_list_layers,
    'fetch': run_fetch,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code"""
    load_environment()
    args = ToolArgumentParser().parse_args(argv)
    config = ToolConfig.from_args(args)
    setup_logging(verbose=config.verbose, log_file=config.log_file)

    try:
        return COMMANDS[args.command](args, config)
    except OperatorCancelled as e:
        logger.warning(f"⚠️  {e}")
        return 0
    except LambdaToolError as e:
        logger.error(f"❌ {e}")
        return 1
    except (ClientError, BotoCoreError) as e:
        logger.error(f"❌ AWS request failed: {error_message(e)}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
