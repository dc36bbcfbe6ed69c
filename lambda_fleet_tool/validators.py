# lambda_fleet_tool/validators.py
"""
Validators for command options and AWS credentials
Single Responsibility: Each validator checks one thing
"""
import logging
import re
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .aws import BOTO_CONFIG, error_code, error_message, is_authorization_error
from .errors import AuthorizationError, InvalidOptionError

logger = logging.getLogger(__name__)

SUPPORTED_REGIONS = (
    'us-east-1',
    'us-east-2',
    'us-west-1',
    'us-west-2',
    'eu-west-1',
    'eu-west-2',
    'eu-west-3',
    'eu-central-1',
    'ap-southeast-1',
    'ap-southeast-2',
    'ap-northeast-1',
)

PROFILE_PATTERN = re.compile(r'[a-zA-Z0-9_-]+')
FUNCTION_NAME_PATTERN = re.compile(r'[a-zA-Z0-9_-]+')
MAX_FUNCTION_NAME_LENGTH = 64


class OptionsValidator:
    """Validates profile, region and function name options"""

    def validate(self, profile: str, region: str, function_name: Optional[str] = None) -> None:
        problems: List[str] = []

        if not profile:
            problems.append("AWS profile cannot be empty")
        elif not PROFILE_PATTERN.fullmatch(profile):
            problems.append("Invalid AWS profile name")

        if region not in SUPPORTED_REGIONS:
            problems.append("Invalid AWS region")

        if function_name is not None:
            if not FUNCTION_NAME_PATTERN.fullmatch(function_name):
                problems.append("Invalid function name")
            elif len(function_name) > MAX_FUNCTION_NAME_LENGTH:
                problems.append(f"Function name longer than {MAX_FUNCTION_NAME_LENGTH} characters")

        if problems:
            raise InvalidOptionError(problems)


class AWSValidator:
    """Validates AWS credentials and access (SRP)"""

    def __init__(self, session: boto3.session.Session, profile: str):
        self.session = session
        self.profile = profile

    def validate(self) -> str:
        """
        Validate AWS credentials and return account ID
        Raises AuthorizationError on failure
        """
        logger.info("Validating AWS credentials...")

        try:
            sts = self.session.client('sts', config=BOTO_CONFIG)
            identity = sts.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            raise AuthorizationError(self._describe(e)) from e

        account_id = identity.get('Account')
        if not account_id or not identity.get('Arn'):
            raise AuthorizationError(f"Unable to verify AWS identity for profile '{self.profile}'")

        logger.info("✅ AWS credentials valid")
        logger.info(f"  Account: {account_id}")
        logger.info(f"  Region: {self.session.region_name}")
        return account_id

    def _describe(self, error: Exception) -> str:
        code = error_code(error)
        if code in ('ExpiredToken', 'ExpiredTokenException', 'TokenRefreshRequired'):
            return (f"AWS credentials for profile '{self.profile}' have expired. "
                    "Please refresh your credentials")
        if code in ('AccessDenied', 'AccessDeniedException', 'UnauthorizedOperation'):
            return f"AWS credentials for profile '{self.profile}' lack necessary permissions"
        if code in ('UnrecognizedClientException', 'InvalidClientTokenId'):
            return f"Invalid AWS credentials for profile '{self.profile}'"
        if is_authorization_error(error):
            return (f"AWS profile '{self.profile}' not found or invalid credentials. "
                    "Configure credentials using: aws configure")
        return f"AWS validation failed: {error_message(error)}"
