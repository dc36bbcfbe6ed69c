import io
import zipfile
from unittest.mock import MagicMock

import pytest
import requests

from lambda_fleet_tool.errors import QueryFailure, ValidationError
from lambda_fleet_tool.fetcher import FunctionFetcher


def zip_bytes(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zipf:
        for name, content in files.items():
            zipf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def http():
    session = MagicMock()
    session.get.return_value = MagicMock(ok=True, content=zip_bytes({"handler.py": "def handler(e, c): pass\n"}))
    return session


@pytest.fixture
def fetcher(lambda_mgr, http):
    lambda_mgr.get_function.return_value = {
        "Code": {"Location": "https://example.com/code.zip"},
        "Configuration": {"Runtime": "python3.12", "Handler": "handler.handler"},
    }
    return FunctionFetcher(lambda_mgr, http=http, timeout=5)


def test_fetch_extracts_into_named_directory(fetcher, http, tmp_path):
    result = fetcher.fetch("UserAuth", tmp_path)

    assert result.path == (tmp_path / "UserAuth").resolve()
    assert (result.path / "handler.py").read_text().startswith("def handler")
    assert result.configuration["Runtime"] == "python3.12"
    http.get.assert_called_once_with("https://example.com/code.zip", timeout=5)


def test_fetch_refuses_non_empty_directory(fetcher, lambda_mgr, tmp_path):
    (tmp_path / "UserAuth").mkdir()
    (tmp_path / "UserAuth" / "keep.txt").write_text("x")

    with pytest.raises(ValidationError, match="not empty"):
        fetcher.fetch("UserAuth", tmp_path)
    lambda_mgr.get_function.assert_not_called()


def test_fetch_refuses_existing_file(fetcher, tmp_path):
    (tmp_path / "UserAuth").write_text("x")

    with pytest.raises(ValidationError, match="already exists"):
        fetcher.fetch("UserAuth", tmp_path)


def test_fetch_missing_function(fetcher, lambda_mgr, tmp_path):
    lambda_mgr.get_function.return_value = None

    with pytest.raises(QueryFailure, match="not found in region 'us-east-2'"):
        fetcher.fetch("Ghost", tmp_path)


def test_fetch_without_code_location(fetcher, lambda_mgr, tmp_path):
    lambda_mgr.get_function.return_value = {"Code": {"RepositoryType": "ECR"}}

    with pytest.raises(QueryFailure, match="download URL"):
        fetcher.fetch("Image", tmp_path)


def test_download_http_error(fetcher, http, tmp_path):
    http.get.return_value = MagicMock(ok=False, status_code=403, reason="Forbidden")

    with pytest.raises(QueryFailure, match="403 Forbidden"):
        fetcher.fetch("UserAuth", tmp_path)


def test_download_connection_error(fetcher, http, tmp_path):
    http.get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(QueryFailure, match="refused"):
        fetcher.fetch("UserAuth", tmp_path)


def test_corrupt_archive(fetcher, http, tmp_path):
    http.get.return_value = MagicMock(ok=True, content=b"not a zip")

    with pytest.raises(QueryFailure, match="not a valid zip"):
        fetcher.fetch("UserAuth", tmp_path)
