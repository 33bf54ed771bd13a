import importlib.util
import logging
import os
import unittest
from unittest.mock import patch

from api_checker.config import logging_config
from api_checker.config.config import Config, PipelineConfig, load_pipeline_config
from api_checker.contracts.probe_run import ProbeKind
from api_checker.core.errors import ConfigError


def make_config(**overrides):
    return type("TestConfig", (Config,), overrides)


class TestConfig(unittest.TestCase):
    def test_config_defaults(self):
        self.assertEqual(Config.RUN_EVERY_SECONDS, 60)
        self.assertEqual(Config.REQUEST_TIMEOUT_SECONDS, 10)
        self.assertEqual(Config.SECONDS_PER_SLOT, 12)
        self.assertEqual(Config.RECENT_SLOT_WINDOW, 64)
        self.assertEqual(Config.ENDPOINT_FAILURE_THRESHOLD, 0)
        self.assertEqual(Config.METRICS_NAMESPACE, "api_checker")

    def test_config_env_override(self):
        # Load a private copy so the shared module keeps its class objects.
        spec = importlib.util.find_spec("api_checker.config.config")
        config_mod = importlib.util.module_from_spec(spec)
        with patch.dict(os.environ, {"RUN_EVERY_SECONDS": "15"}):
            spec.loader.exec_module(config_mod)
        self.assertEqual(config_mod.Config.RUN_EVERY_SECONDS, 15)
        self.assertEqual(Config.RUN_EVERY_SECONDS, 60)
        cfg = load_pipeline_config(make_config(BEACON_API_ENDPOINTS="http://a:1"))
        self.assertIsInstance(cfg, PipelineConfig)


class TestLoadPipelineConfig(unittest.TestCase):
    def test_builds_frozen_config(self):
        cfg = load_pipeline_config(
            make_config(
                BEACON_API_ENDPOINTS="http://lighthouse:5052/, https://prysm:3500",
                PROBES="state_root, validators",
            )
        )
        self.assertIsInstance(cfg, PipelineConfig)
        self.assertEqual(cfg.endpoints, ("http://lighthouse:5052", "https://prysm:3500"))
        self.assertEqual(cfg.probes, (ProbeKind.STATE_ROOT, ProbeKind.VALIDATORS))
        with self.assertRaises(Exception):
            cfg.run_every_seconds = 1

    def test_default_probe_order(self):
        cfg = load_pipeline_config(make_config(BEACON_API_ENDPOINTS="http://a:1"))
        self.assertEqual(list(cfg.probes), list(ProbeKind))

    def test_empty_endpoint_list_rejected(self):
        with self.assertRaises(ConfigError):
            load_pipeline_config(make_config(BEACON_API_ENDPOINTS=" , "))

    def test_invalid_url_rejected(self):
        with self.assertRaises(ConfigError):
            load_pipeline_config(make_config(BEACON_API_ENDPOINTS="lighthouse:5052"))

    def test_duplicate_endpoints_rejected(self):
        with self.assertRaises(ConfigError):
            load_pipeline_config(make_config(BEACON_API_ENDPOINTS="http://a:1,http://a:1/"))

    def test_unknown_probe_rejected(self):
        with self.assertRaises(ConfigError):
            load_pipeline_config(
                make_config(BEACON_API_ENDPOINTS="http://a:1", PROBES="validators,committees")
            )

    def test_non_positive_interval_rejected(self):
        with self.assertRaises(ConfigError):
            load_pipeline_config(
                make_config(BEACON_API_ENDPOINTS="http://a:1", RUN_EVERY_SECONDS=0)
            )


class TestLoggingConfig(unittest.TestCase):
    def test_logging_setup(self):
        try:
            logging_config.setup_logging()
        except Exception as e:
            self.fail(f"setup_logging() raised {e}")
        logger = logging.getLogger()
        self.assertTrue(logger.hasHandlers())

    def test_file_handler_only_when_configured(self):
        self.assertNotIn("file", logging_config.build_logging_config("INFO", None)["handlers"])
        cfg = logging_config.build_logging_config("DEBUG", "logs/checker.log")
        self.assertEqual(cfg["handlers"]["file"]["filename"], "logs/checker.log")
        self.assertEqual(cfg["root"]["handlers"], ["console", "file"])


if __name__ == "__main__":
    unittest.main()
