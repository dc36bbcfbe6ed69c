# lambda_fleet_tool/fetcher.py
"""
Download a deployed function's code into a local directory
"""
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .aws.lambda_manager import LambdaManager
from .errors import QueryFailure, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Where the code went and the configuration it was deployed with"""

    path: Path
    configuration: Dict[str, Any] = field(default_factory=dict)


class FunctionFetcher:
    """Fetches function code archives via their pre-signed location"""

    def __init__(
            self,
            lambda_mgr: LambdaManager,
            http: Optional[requests.Session] = None,
            timeout: float = 60.0
    ):
        self.lambda_mgr = lambda_mgr
        self.http = http or requests.Session()
        self.timeout = timeout

    @staticmethod
    def prepare_output_dir(output: Path, function_name: str) -> Path:
        """Create output/function_name, refusing to reuse a non-empty directory"""
        target = (Path(output) / function_name).resolve()
        if target.exists():
            if not target.is_dir():
                raise ValidationError(
                    f"A file with the name '{function_name}' already exists at the specified location")
            if any(target.iterdir()):
                raise ValidationError(f"Directory '{target}' already exists and is not empty")
        target.mkdir(parents=True, exist_ok=True)
        return target

    def download(self, location: str) -> bytes:
        try:
            response = self.http.get(location, timeout=self.timeout)
        except requests.RequestException as e:
            raise QueryFailure(f"Failed to download function code: {e}") from e
        if not response.ok:
            raise QueryFailure(f"Failed to download function code: {response.status_code} {response.reason}")
        return response.content

    @staticmethod
    def extract(archive: bytes, target: Path) -> None:
        try:
            with zipfile.ZipFile(io.BytesIO(archive)) as zipf:
                zipf.extractall(target)
        except zipfile.BadZipFile as e:
            raise QueryFailure(f"Downloaded function code is not a valid zip archive: {e}") from e

    def fetch(self, function_name: str, output: Path = Path('.')) -> FetchResult:
        target = self.prepare_output_dir(output, function_name)

        logger.info("Checking if function exists...")
        description = self.lambda_mgr.get_function(function_name)
        if not description:
            raise QueryFailure(f"Lambda function '{function_name}' not found in region '{self.lambda_mgr.region}'")

        location = (description.get('Code') or {}).get('Location')
        if not location:
            raise QueryFailure("Unable to get function code download URL")

        logger.info("Downloading and extracting function code...")
        self.extract(self.download(location), target)

        configuration = description.get('Configuration') or {}
        logger.info(f"✅ Lambda function '{function_name}' code downloaded and extracted successfully!")
        logger.info("")
        logger.info(f"📁 Downloaded to: {target}/")
        logger.info("📊 Function details (from AWS):")
        logger.info(f"   🚀 Function Name: {function_name}")
        logger.info(f"   📍 Region: {self.lambda_mgr.region}")
        logger.info(f"   🔐 Role: {configuration.get('Role', 'Unknown')}")
        logger.info(f"   🎯 Handler: {configuration.get('Handler', 'Unknown')}")
        logger.info(f"   ⚡ Runtime: {configuration.get('Runtime', 'Unknown')}")
        logger.info(f"   ⏱️ Timeout: {configuration.get('Timeout', 'Unknown')}s")
        logger.info(f"   💾 Memory: {configuration.get('MemorySize', 'Unknown')}MB")
        return FetchResult(path=target, configuration=configuration)
