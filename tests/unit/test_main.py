"""Unit tests for main.py entry point."""

import pytest
from pytest_mock import MockerFixture

import main


@pytest.mark.unit
class TestMain:
    """Tests for the main entry point."""

    def test_main_builds_and_starts_service(self, mocker: MockerFixture) -> None:
        """main configures logging, builds the service and starts it."""
        mock_setup_logging = mocker.patch("main.setup_logging")
        mock_service_cls = mocker.patch("main.MicroService")

        main.main()

        mock_setup_logging.assert_called_once()
        settings = mock_service_cls.call_args.args[0]
        assert settings.api_port == 3000
        mock_service_cls.return_value.start.assert_called_once_with()

    def test_port_env_overrides_settings(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """PORT from the platform wins over API_PORT."""
        monkeypatch.setenv("API_PORT", "9000")
        monkeypatch.setenv("PORT", "8080")
        mocker.patch("main.setup_logging")
        mock_service_cls = mocker.patch("main.MicroService")

        main.main()

        settings = mock_service_cls.call_args.args[0]
        assert settings.api_port == 8080

    def test_api_port_without_platform_port(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """API_PORT applies when PORT is not set."""
        monkeypatch.setenv("API_PORT", "9000")
        mocker.patch("main.setup_logging")
        mock_service_cls = mocker.patch("main.MicroService")

        main.main()

        assert mock_service_cls.call_args.args[0].api_port == 9000
