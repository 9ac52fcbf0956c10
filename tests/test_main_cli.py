"""
Test main.py CLI argument parsing and dispatch

These tests validate that the CLI entry point parses parameters and headers,
calls the right service operation, and exits with a clear error on failure.
"""

import argparse
import sys
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

import main
from httpservice.exceptions import RequestBuildError


def _mock_service(status_code=200, text="hello"):
    service = MagicMock()
    response = Mock(status_code=status_code, reason="OK", text=text, headers={"X-Test": "1"})
    service.get_with_headers.return_value = response
    service.post_with_headers.return_value = response
    return service


class TestParseKeyValues:
    """Test KEY=VALUE / NAME: VALUE parsing"""

    def test_collects_repeated_keys(self):
        result = main.parse_key_values(["tag=a", "tag=b", "id=7"], "=", "parameter")

        assert result == {"tag": ["a", "b"], "id": ["7"]}

    def test_splits_on_first_separator(self):
        result = main.parse_key_values(["Authorization: Bearer a:b"], ":", "header")

        assert result == {"Authorization": ["Bearer a:b"]}

    def test_missing_separator_raises(self):
        with pytest.raises(argparse.ArgumentTypeError):
            main.parse_key_values(["novalue"], "=", "parameter")


class TestLoadBody:
    """Test POST body sources"""

    def test_data_string(self):
        assert main.load_body("payload", None) == b"payload"

    def test_data_file(self, tmp_path):
        body_file = tmp_path / "body.json"
        body_file.write_bytes(b'{"a": 1}')

        assert main.load_body(None, str(body_file)) == b'{"a": 1}'

    def test_no_body(self):
        assert main.load_body(None, None) == b""


class TestDispatch:
    """Test that the CLI calls the service correctly"""

    @patch("main.new_http_service")
    def test_get_with_params_and_headers(self, mock_new_service, capsys):
        service = _mock_service()
        mock_new_service.return_value = service
        test_args = [
            "main.py",
            "get",
            "http://svc",
            "users",
            "-p",
            "id=7",
            "-H",
            "Authorization: Bearer t",
        ]

        with patch.object(sys, "argv", test_args):
            main.main()

        mock_new_service.assert_called_once()
        assert mock_new_service.call_args[0][0] == "http://svc"
        service.get_with_headers.assert_called_once_with(
            "users", {"id": ["7"]}, {"Authorization": "Bearer t"}, ctx=None
        )
        service.transport.close.assert_called_once()

        output = capsys.readouterr().out
        assert "HTTP 200 OK" in output
        assert "hello" in output

    @patch("main.new_http_service")
    def test_post_to_base_url(self, mock_new_service):
        service = _mock_service()
        mock_new_service.return_value = service

        with patch.object(sys, "argv", ["main.py", "post", "http://svc", "--data", "payload"]):
            main.main()

        service.post_with_headers.assert_called_once_with("", {}, b"payload", {}, ctx=None)

    @patch("main.new_http_service")
    def test_timeout_creates_call_context(self, mock_new_service):
        service = _mock_service()
        mock_new_service.return_value = service

        with patch.object(sys, "argv", ["main.py", "get", "http://svc", "x", "--timeout", "5"]):
            main.main()

        ctx = service.get_with_headers.call_args[1]["ctx"]
        assert ctx is not None
        assert 0 < ctx.remaining() <= 5

    @patch("main.new_http_service")
    def test_zero_timeout_still_creates_call_context(self, mock_new_service):
        service = _mock_service()
        mock_new_service.return_value = service

        with patch.object(sys, "argv", ["main.py", "get", "http://svc", "x", "--timeout", "0"]):
            main.main()

        ctx = service.get_with_headers.call_args[1]["ctx"]
        assert ctx is not None
        assert ctx.remaining() == 0.0

    @patch("main.new_http_service")
    def test_verbose_prints_headers(self, mock_new_service, capsys):
        mock_new_service.return_value = _mock_service()

        with patch.object(sys, "argv", ["main.py", "get", "http://svc", "x", "--verbose"]):
            main.main()

        assert "X-Test: 1" in capsys.readouterr().out


class TestErrors:
    """Test error exits"""

    def test_data_with_get_is_rejected(self):
        test_args = ["main.py", "get", "http://svc", "x", "--data", "nope"]

        with patch.object(sys, "argv", test_args), pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code != 0

    def test_bad_param_is_rejected(self):
        test_args = ["main.py", "get", "http://svc", "x", "-p", "novalue"]

        with patch.object(sys, "argv", test_args), pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code != 0

    @patch("main.new_http_service")
    def test_transport_error_exits_1(self, mock_new_service):
        service = _mock_service()
        service.get_with_headers.side_effect = requests.exceptions.ConnectionError("refused")
        mock_new_service.return_value = service

        with patch.object(sys, "argv", ["main.py", "get", "http://svc", "x"]), pytest.raises(
            SystemExit
        ) as exc_info:
            main.main()

        assert exc_info.value.code == 1
        service.transport.close.assert_called_once()

    @patch("main.new_http_service")
    def test_build_error_exits_1(self, mock_new_service):
        service = _mock_service()
        service.get_with_headers.side_effect = RequestBuildError("No host supplied", url="http://")
        mock_new_service.return_value = service

        with patch.object(sys, "argv", ["main.py", "get", "http://", "x"]), pytest.raises(
            SystemExit
        ) as exc_info:
            main.main()

        assert exc_info.value.code == 1

    @patch("main.config")
    def test_unknown_exporter_exits_1(self, mock_config):
        mock_config.get.side_effect = lambda key, default=None: (
            "zipkin" if key == "tracing.exporter" else default
        )

        with patch.object(sys, "argv", ["main.py", "get", "http://svc", "x"]), pytest.raises(
            SystemExit
        ) as exc_info:
            main.main()

        assert exc_info.value.code == 1

    @patch("main.new_http_service")
    def test_missing_data_file_exits_1(self, mock_new_service, tmp_path):
        mock_new_service.return_value = _mock_service()
        test_args = ["main.py", "post", "http://svc", "x", "--data-file", str(tmp_path / "nope")]

        with patch.object(sys, "argv", test_args), pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1
