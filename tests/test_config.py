import unittest

from dotstrap.config import DEFAULT_CRON_SCHEDULE, DEFAULT_REPO, Config, parse_bool
from dotstrap.errors import SetupError


class ParseBoolTests(unittest.TestCase):
    def test_true_spellings(self):
        for value in ("true", "TRUE", "1", "yes", " on "):
            with self.subTest(value=value):
                self.assertTrue(parse_bool(value))

    def test_false_spellings(self):
        for value in ("false", "False", "0", "no", "off"):
            with self.subTest(value=value):
                self.assertFalse(parse_bool(value))

    def test_invalid_value_names_the_variable(self):
        with self.assertRaisesRegex(SetupError, "LOG_SETUP"):
            parse_bool("maybe", "LOG_SETUP")


class ConfigFromEnvTests(unittest.TestCase):
    def test_defaults(self):
        config = Config.from_env({})
        self.assertEqual(config.REPO_HTTPS, DEFAULT_REPO)
        self.assertTrue(config.LOG_SETUP)
        self.assertEqual(config.LOG_FILE, "setup.log")
        self.assertTrue(config.INSTALL_NERDFONT)
        self.assertFalse(config.SETUP_CRON)
        self.assertEqual(config.CRON_SCHEDULE, DEFAULT_CRON_SCHEDULE)

    def test_environment_overrides(self):
        config = Config.from_env(
            {
                "REPO_HTTPS": "https://example.com/dots.git",
                "LOG_SETUP": "false",
                "INSTALL_NERDFONT": "no",
                "SETUP_CRON": "true",
                "CRON_SCHEDULE": "*/30 * * * *",
            }
        )
        self.assertEqual(config.REPO_HTTPS, "https://example.com/dots.git")
        self.assertFalse(config.LOG_SETUP)
        self.assertFalse(config.INSTALL_NERDFONT)
        self.assertTrue(config.SETUP_CRON)
        self.assertEqual(config.CRON_SCHEDULE, "*/30 * * * *")


if __name__ == "__main__":
    unittest.main()
