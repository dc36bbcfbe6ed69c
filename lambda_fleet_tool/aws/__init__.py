# lambda_fleet_tool/aws/__init__.py
"""
AWS service managers sharing one profile/region session
"""
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
    ProfileNotFound,
)

from ..errors import AuthorizationError

logger = logging.getLogger(__name__)

BOTO_CONFIG = Config(retries={'mode': 'standard', 'max_attempts': 5})

AUTHORIZATION_ERROR_CODES = {
    'AccessDenied',
    'AccessDeniedException',
    'UnauthorizedOperation',
    'UnrecognizedClientException',
    'InvalidClientTokenId',
    'ExpiredToken',
    'ExpiredTokenException',
    'TokenRefreshRequired',
}
NOT_FOUND_ERROR_CODES = {'ResourceNotFoundException', 'NoSuchEntity', 'NotFoundException'}
RETRYABLE_ERROR_CODES = {
    'Throttling',
    'ThrottlingException',
    'TooManyRequestsException',
    'RequestLimitExceeded',
    'ServiceException',
    'ServiceUnavailableException',
}


def error_code(error: BaseException) -> str:
    """AWS error code of a ClientError, empty for anything else"""
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code', '')
    return ''


def error_message(error: BaseException) -> str:
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Message') or str(error)
    return str(error)


def is_authorization_error(error: BaseException) -> bool:
    if isinstance(error, (NoCredentialsError, PartialCredentialsError, ProfileNotFound)):
        return True
    return error_code(error) in AUTHORIZATION_ERROR_CODES


def is_not_found_error(error: BaseException) -> bool:
    return error_code(error) in NOT_FOUND_ERROR_CODES


def create_session(profile: Optional[str], region: Optional[str]) -> boto3.session.Session:
    """
    Build a boto3 session for a named profile

    The 'default' profile defers to the standard credential chain so that
    environment credentials work without a config file.
    """
    profile_name = profile if profile and profile != 'default' else None
    try:
        return boto3.session.Session(profile_name=profile_name, region_name=region)
    except ProfileNotFound as e:
        raise AuthorizationError(f"AWS profile '{profile}' not found or invalid credentials") from e


class AWSServiceManager(ABC):
    """
    Base class for AWS service managers
    Provides common functionality for all AWS services
    """

    def __init__(self, session: boto3.session.Session):
        self.session = session
        self.region = session.region_name
        self._client = None
        self._client_lock = threading.Lock()

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Return AWS service name (e.g., 'lambda', 'logs')"""
        pass

    @property
    def client(self):
        """Lazy-load boto3 client; sessions are not thread-safe, so creation is serialized"""
        with self._client_lock:
            if self._client is None:
                self._client = self.session.client(self.service_name, config=BOTO_CONFIG)
        return self._client

    def safe_call(self, operation: str, **kwargs) -> Any:
        """
        Call an AWS API exactly once, logging failures before re-raising
        """
        try:
            response = getattr(self.client, operation)(**kwargs)
            logger.debug(f"✅ {self.service_name}.{operation} succeeded")
            return response
        except ClientError as e:
            logger.debug(f"❌ {self.service_name}.{operation} failed: {error_code(e)}")
            raise

    def safe_call_with_retry(self, operation: str, max_attempts: int = 3, base_delay: float = 1.0, **kwargs) -> Any:
        """
        Call an idempotent AWS read with exponential backoff on throttling
        """
        for attempt in range(max_attempts):
            try:
                return self.safe_call(operation, **kwargs)
            except ClientError as e:
                code = error_code(e)
                if code not in RETRYABLE_ERROR_CODES or attempt == max_attempts - 1:
                    raise
                delay = base_delay * (2 ** attempt)
                logger.debug(
                    f"⚠️ {self.service_name}.{operation} failed with {code}, retrying in {delay}s...")
                time.sleep(delay)
