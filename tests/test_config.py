"""
Tests for configuration and small utilities.
"""
import unittest

from matchday.utils import AppConfig, fmt_mmss


class AppConfigTests(unittest.TestCase):

    def test_defaults(self):
        config = AppConfig.from_env({})
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 7122)
        self.assertEqual(config.data_dir, "data")
        self.assertIsNone(config.roster_url)
        self.assertEqual(config.tick_interval, 1.0)
        self.assertEqual(config.log_level, "INFO")

    def test_environment_overrides(self):
        config = AppConfig.from_env({
            "MATCHDAY_HOST": "0.0.0.0",
            "MATCHDAY_PORT": "8080",
            "MATCHDAY_DATA_DIR": "/tmp/matchday",
            "MATCHDAY_ROSTER_URL": "http://club:7122",
            "MATCHDAY_TICK_INTERVAL": "0.5",
            "MATCHDAY_LOG_LEVEL": "debug",
        })
        self.assertEqual(config.port, 8080)
        self.assertEqual(config.roster_url, "http://club:7122")
        self.assertEqual(config.tick_interval, 0.5)
        self.assertEqual(config.log_level, "DEBUG")

    def test_empty_roster_url_means_local(self):
        self.assertIsNone(AppConfig.from_env({"MATCHDAY_ROSTER_URL": ""}).roster_url)

    def test_bad_port(self):
        with self.assertRaises(ValueError):
            AppConfig.from_env({"MATCHDAY_PORT": "eighty"})


class FormatTests(unittest.TestCase):

    def test_fmt_mmss(self):
        self.assertEqual(fmt_mmss(0), "00:00")
        self.assertEqual(fmt_mmss(125), "02:05")
        self.assertEqual(fmt_mmss(3600), "60:00")
        self.assertEqual(fmt_mmss(-5), "00:00")


if __name__ == "__main__":
    unittest.main()
