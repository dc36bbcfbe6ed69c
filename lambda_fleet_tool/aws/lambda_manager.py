# lambda_fleet_tool/aws/lambda_manager.py
"""
Lambda Function Manager for fleet inventory and configuration updates
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from . import AWSServiceManager, error_message, is_authorization_error, is_not_found_error
from ..errors import AuthorizationError, QueryFailure
from ..models import FunctionRecord

logger = logging.getLogger(__name__)


class LambdaManager(AWSServiceManager):
    """Reads and updates Lambda function configuration"""

    @property
    def service_name(self) -> str:
        return 'lambda'

    def list_functions(self) -> List[FunctionRecord]:
        """
        List every function in the account/region, keeping only name,
        runtime and layer ARNs. Any failure aborts the command.
        """
        records: List[FunctionRecord] = []
        try:
            paginator = self.client.get_paginator('list_functions')
            for page in paginator.paginate():
                for fn in page.get('Functions', []):
                    records.append(FunctionRecord(
                        name=fn['FunctionName'],
                        runtime=fn.get('Runtime') or '',
                        layers=tuple(layer['Arn'] for layer in fn.get('Layers') or []),
                    ))
        except (ClientError, BotoCoreError) as e:
            if is_authorization_error(e):
                raise AuthorizationError(
                    f"AWS credentials lack permission to list Lambda functions: {error_message(e)}") from e
            raise QueryFailure(f"Failed to list Lambda functions: {error_message(e)}") from e

        logger.debug(f"Listed {len(records)} Lambda functions in {self.region}")
        return records

    def get_function_configuration(self, function_name: str) -> Dict[str, Any]:
        return self.safe_call('get_function_configuration', FunctionName=function_name)

    def get_function(self, function_name: str) -> Optional[Dict[str, Any]]:
        """Full function description with code location, None when it does not exist"""
        try:
            return self.safe_call('get_function', FunctionName=function_name)
        except ClientError as e:
            if is_not_found_error(e):
                return None
            raise

    def update_function_configuration(
            self,
            function_name: str,
            runtime: Optional[str] = None,
            layers: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """
        Submit one configuration update carrying every requested change.
        The update completes asynchronously; poll get_function_configuration.
        """
        params: Dict[str, Any] = {'FunctionName': function_name}
        if runtime is not None:
            params['Runtime'] = runtime
        if layers is not None:
            params['Layers'] = list(layers)
        if len(params) == 1:
            raise ValueError(f"No configuration change requested for {function_name}")

        logger.debug(f"Updating {function_name} with {params}")
        return self.safe_call('update_function_configuration', **params)
