from __future__ import annotations

import logging
import os
import unittest
from unittest import mock

import structlog
from pydantic import ValidationError

from sproc_repo import RepositorySettings, get_settings, reset_settings
from sproc_repo.logging import configure_logging, get_logger


class RepositorySettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        reset_settings()
        self.addCleanup(reset_settings)

    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = RepositorySettings(_env_file=None)

        self.assertEqual(settings.connection_string, "")
        self.assertEqual(settings.dialect, "mssql")
        self.assertIsNone(settings.connect_timeout)
        self.assertEqual(settings.log_level, "INFO")
        self.assertEqual(settings.log_format, "console")

    def test_reads_prefixed_environment(self) -> None:
        env = {
            "SPROC_CONNECTION_STRING": "postgresql://localhost/orders",
            "SPROC_DIALECT": "postgres",
            "SPROC_CONNECT_TIMEOUT": "2.5",
            "SPROC_LOG_FORMAT": "json",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = RepositorySettings(_env_file=None)

        self.assertEqual(settings.connection_string, "postgresql://localhost/orders")
        self.assertEqual(settings.dialect, "postgres")
        self.assertEqual(settings.connect_timeout, 2.5)
        self.assertEqual(settings.log_format, "json")

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValidationError):
            RepositorySettings(dialect="oracle")
        with self.assertRaises(ValidationError):
            RepositorySettings(connect_timeout=0)

    def test_get_settings_is_cached_until_reset(self) -> None:
        first = get_settings()

        self.assertIs(get_settings(), first)
        reset_settings()
        self.assertIsNot(get_settings(), first)


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved = [(handler, handler.formatter) for handler in root.handlers]
        level = root.level

        def restore() -> None:
            for handler in list(root.handlers):
                if handler not in dict(saved):
                    root.removeHandler(handler)
            for handler, formatter in saved:
                handler.setFormatter(formatter)
            root.setLevel(level)
            structlog.reset_defaults()

        self.addCleanup(restore)

    def test_json_format_installs_processor_formatter(self) -> None:
        configure_logging(RepositorySettings(log_format="json", log_level="DEBUG"))

        config = structlog.get_config()
        self.assertIsInstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
        self.assertIs(config["wrapper_class"], structlog.stdlib.BoundLogger)
        handlers = logging.getLogger().handlers
        self.assertTrue(handlers)
        for handler in handlers:
            self.assertIsInstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_console_format(self) -> None:
        configure_logging(RepositorySettings(log_format="console"))

        for handler in logging.getLogger().handlers:
            self.assertIsInstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_get_logger_returns_structlog_logger(self) -> None:
        logger = get_logger("sproc_repo.tests")

        self.assertTrue(hasattr(logger, "bind"))
