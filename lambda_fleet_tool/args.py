# lambda_fleet_tool/args.py
"""
Command line argument parsing - Class-based for extensibility
"""
import argparse
from pathlib import Path
from typing import List, Optional

PROG = 'lambda-fleet-tool'


class ToolArgumentParser:
    """Class-based argument parser with one sub-command per operation"""

    def __init__(self, prog: str = PROG, description: str = None):
        self.prog = prog
        self.description = description or 'CLI for managing AWS Lambda functions across an account'
        self.parser = None
        self.subparsers = None
        self._initialize_parser()

    def _initialize_parser(self):
        """Initialize the argument parser with all sub-commands"""
        self.parser = argparse.ArgumentParser(
            prog=self.prog,
            description=self.description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog_text()
        )
        self.subparsers = self.parser.add_subparsers(dest='command', metavar='<command>')
        self.subparsers.required = True

        common = self._common_parser()
        self._add_upgrade_command(common)
        self._add_list_functions_command(common)
        self._add_list_layers_command(common)
        self._add_fetch_command(common)

    def _common_parser(self) -> argparse.ArgumentParser:
        """AWS targeting and logging options every command accepts"""
        common = argparse.ArgumentParser(add_help=False)
        aws_group = common.add_argument_group('AWS Options')
        aws_group.add_argument(
            '--profile',
            help='AWS CLI profile (default: $AWS_PROFILE or "default")'
        )
        aws_group.add_argument(
            '--region',
            help='AWS region (default: $AWS_REGION or us-east-2)'
        )
        log_group = common.add_argument_group('Logging Options')
        log_group.add_argument(
            '--verbose', '-v',
            action='store_true',
            help='Enable verbose logging'
        )
        log_group.add_argument(
            '--log-file',
            type=Path,
            help='Also write log output to this file'
        )
        return common

    def _add_upgrade_command(self, common: argparse.ArgumentParser):
        upgrade = self.subparsers.add_parser(
            'upgrade',
            parents=[common],
            help='Upgrade the runtime of python or nodejs functions',
            description='Upgrade functions of one runtime family to a target runtime, '
                        'optionally replacing their layers with a single layer'
        )
        upgrade.add_argument(
            'target_runtime',
            metavar='TARGET_RUNTIME',
            help='Target runtime, e.g. python3.12 or nodejs20.x'
        )

        selection = upgrade.add_argument_group('Selection Options')
        exclusive = selection.add_mutually_exclusive_group()
        exclusive.add_argument(
            '--all',
            action='store_true',
            help='Upgrade every function of the target runtime family'
        )
        exclusive.add_argument(
            '--include',
            action='append',
            metavar='NAMES',
            help='Upgrade only these functions; comma separated, repeatable (--include a,b --include c)'
        )

        changes = upgrade.add_argument_group('Change Options')
        changes.add_argument(
            '--layer',
            metavar='LAYER_ARN',
            help='Replace the entire layer list of each function with this single layer version ARN'
        )
        changes.add_argument(
            '--timeout',
            type=float,
            metavar='SECONDS',
            help='Seconds to wait for each update to finish (default: 60)'
        )

        other = upgrade.add_argument_group('Other Options')
        other.add_argument(
            '--yes', '-y',
            action='store_true',
            help='Do not ask for confirmation before applying updates'
        )
        other.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the plan without making changes'
        )
        other.add_argument(
            '--report-file',
            type=Path,
            metavar='PATH',
            help='Write a JSON report of the run to PATH'
        )

    def _add_list_functions_command(self, common: argparse.ArgumentParser):
        list_functions = self.subparsers.add_parser(
            'list-functions',
            parents=[common],
            help='List functions with runtime, layers and last invocation'
        )
        list_functions.add_argument(
            '--runtime',
            help='Only show functions whose runtime contains this text (e.g. python, nodejs20)'
        )

    def _add_list_layers_command(self, common: argparse.ArgumentParser):
        list_layers = self.subparsers.add_parser(
            'list-layers',
            parents=[common],
            help='List functions of a runtime family that use layers'
        )
        list_layers.add_argument(
            '--runtime',
            default='python',
            help='Runtime family, python or nodejs (default: python)'
        )

    def _add_fetch_command(self, common: argparse.ArgumentParser):
        fetch = self.subparsers.add_parser(
            'fetch',
            parents=[common],
            help='Download a function\'s code from AWS'
        )
        fetch.add_argument('function_name', metavar='NAME', help='Function name')
        fetch.add_argument(
            '--output',
            type=Path,
            default=Path('.'),
            help='Output directory (default: current directory)'
        )

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse and return arguments"""
        return self.parser.parse_args(argv)

    def _get_epilog_text(self) -> str:
        return f"""
Examples:
  {self.prog} upgrade python3.12                        # Pick functions interactively
  {self.prog} upgrade python3.12 --all --dry-run        # Show the full plan only
  {self.prog} upgrade nodejs20.x --include api,worker   # Upgrade named functions
  {self.prog} upgrade python3.12 --all \\
                      --layer arn:aws:lambda:us-east-2:123456789012:layer:deps:7
  {self.prog} list-functions --runtime python
  {self.prog} list-layers --runtime nodejs
  {self.prog} fetch UserAuth --output ./backup --profile prod
"""
