# lambda_fleet_tool/aws/logs_manager.py
"""
CloudWatch Logs Manager for last invocation lookups
"""
import logging
from typing import Optional

from botocore.exceptions import ClientError

from . import AWSServiceManager, is_not_found_error

logger = logging.getLogger(__name__)


def log_group_name(function_name: str) -> str:
    return f"/aws/lambda/{function_name}"


class LogsManager(AWSServiceManager):
    """Reads function log groups"""

    @property
    def service_name(self) -> str:
        return 'logs'

    def latest_event_timestamp(self, function_name: str) -> Optional[int]:
        """
        Epoch millis of the newest log event for a function.
        None when the log group, its streams or their events do not exist.
        """
        try:
            response = self.safe_call_with_retry(
                'describe_log_streams',
                logGroupName=log_group_name(function_name),
                orderBy='LastEventTime',
                descending=True,
                limit=1,
            )
        except ClientError as e:
            if is_not_found_error(e):
                logger.debug(f"No log group for {function_name}")
                return None
            raise

        streams = response.get('logStreams') or []
        if not streams:
            return None
        timestamp = streams[0].get('lastEventTimestamp')
        return int(timestamp) if timestamp else None
