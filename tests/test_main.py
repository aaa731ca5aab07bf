import os
import signal
import unittest
from unittest import mock

from click.testing import CliRunner

from dotstrap import main as main_module
from dotstrap.config import Config
from dotstrap.errors import SetupError
from dotstrap.platforms import Platform

CLEAN_ENV = {
    "REPO_HTTPS": None,
    "LOG_SETUP": None,
    "LOG_FILE": None,
    "INSTALL_NERDFONT": None,
    "SETUP_CRON": None,
    "CRON_SCHEDULE": None,
}


class RunSetupTests(unittest.TestCase):
    def _patch_steps(self):
        names = [
            "detect_platform",
            "install_dependencies",
            "install_nerdfont",
            "setup_shell",
            "setup_chezmoi",
            "register_cron",
        ]
        patchers = {name: mock.patch.object(main_module, name) for name in names}
        mocks = {name: patcher.start() for name, patcher in patchers.items()}
        for patcher in patchers.values():
            self.addCleanup(patcher.stop)
        mocks["detect_platform"].return_value = Platform.DEBIAN
        return mocks

    def test_runs_steps_in_order(self):
        mocks = self._patch_steps()
        order = []
        for name, m in mocks.items():
            m.side_effect = (lambda n, rv: lambda *a, **k: order.append(n) or rv)(name, m.return_value)

        main_module.run_setup(Config(SETUP_CRON=True))

        self.assertEqual(
            order,
            [
                "detect_platform",
                "install_dependencies",
                "install_nerdfont",
                "setup_shell",
                "setup_chezmoi",
                "register_cron",
            ],
        )

    def test_optional_steps_are_skipped(self):
        mocks = self._patch_steps()
        main_module.run_setup(Config(INSTALL_NERDFONT=False, SETUP_CRON=False))
        mocks["install_nerdfont"].assert_not_called()
        mocks["register_cron"].assert_not_called()
        mocks["setup_chezmoi"].assert_called_once()

    def test_stops_at_first_failure(self):
        mocks = self._patch_steps()
        mocks["install_dependencies"].side_effect = SetupError("boom")
        with self.assertRaises(SetupError):
            main_module.run_setup(Config())
        mocks["setup_shell"].assert_not_called()

    def test_invalid_schedule_fails_before_any_step(self):
        mocks = self._patch_steps()
        with self.assertRaises(SetupError):
            main_module.run_setup(Config(SETUP_CRON=True, CRON_SCHEDULE="* * *"))
        mocks["detect_platform"].assert_not_called()


class CliTests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        cleanup = mock.patch.object(main_module.atexit, "register")
        cleanup.start()
        self.addCleanup(cleanup.stop)

    def test_success_exits_zero_and_applies_overrides(self):
        with mock.patch.object(main_module, "run_setup") as run_setup:
            result = self.runner.invoke(
                main_module.main,
                ["--no-log", "--no-font", "--repo", "https://example.com/d.git"],
                env=CLEAN_ENV,
            )
        self.assertEqual(result.exit_code, 0, result.output)
        config = run_setup.call_args.args[0]
        self.assertEqual(config.REPO_HTTPS, "https://example.com/d.git")
        self.assertFalse(config.INSTALL_NERDFONT)
        self.assertIn("exec zsh", result.output)

    def test_setup_error_exits_one(self):
        with mock.patch.object(
            main_module, "run_setup", side_effect=SetupError("Unsupported OS: Plan9")
        ):
            result = self.runner.invoke(main_module.main, ["--no-log"], env=CLEAN_ENV)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unsupported OS: Plan9", result.output)

    def test_invalid_boolean_env_exits_one(self):
        env = dict(CLEAN_ENV, LOG_SETUP="sometimes")
        with mock.patch.object(main_module, "run_setup") as run_setup:
            result = self.runner.invoke(main_module.main, [], env=env)
        self.assertEqual(result.exit_code, 1)
        run_setup.assert_not_called()

    def test_transcript_written_when_logging_enabled(self):
        with self.runner.isolated_filesystem():
            with mock.patch.object(main_module, "run_setup"):
                result = self.runner.invoke(main_module.main, ["--log-file", "run.log"], env=CLEAN_ENV)
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertTrue(os.path.isfile("run.log"))
            with open("run.log", encoding="utf-8") as f:
                self.assertIn("Starting", f.read())


class SignalHandlerTests(unittest.TestCase):
    def test_exit_codes(self):
        for signum, code in ((signal.SIGINT, 130), (signal.SIGTERM, 143), (signal.SIGHUP, 128 + signal.SIGHUP)):
            with self.subTest(signal=signum):
                with mock.patch.object(main_module, "cleanup_temp_files") as cleanup:
                    with self.assertRaises(SystemExit) as ctx:
                        main_module.signal_handler(signum, None)
                self.assertEqual(ctx.exception.code, code)
                cleanup.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
