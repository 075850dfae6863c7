"""Tests for mac_cleanup.services.external_service."""
import subprocess
import unittest
from unittest import mock

from mac_cleanup.services import external_service as external

DF = (
    "Images\t4.2GB\t3.1GB (73%)\n"
    "Containers\t120MB\t120MB (100%)\n"
    "Local Volumes\t1GB\t0B (0%)\n"
    "Build Cache\t512kB\t512kB\n"
    "garbage line\n"
)


class TestDockerParsing(unittest.TestCase):
    def test_parse_size(self) -> None:
        self.assertEqual(external.parse_docker_size("0B"), 0)
        self.assertEqual(external.parse_docker_size("512kB"), 512 * 1024)
        self.assertEqual(external.parse_docker_size("1.5GB (40%)"), int(1.5 * 1024**3))
        self.assertEqual(external.parse_docker_size("n/a"), 0)
        self.assertEqual(external.parse_docker_size("..GB"), 0)
        self.assertEqual(external.parse_docker_size("1.2.3MB"), 0)

    def test_parse_df_sums_reclaimable(self) -> None:
        expected = int(3.1 * 1024**3) + 120 * 1024**2 + 512 * 1024
        self.assertEqual(external.parse_docker_df(DF), expected)

    def test_parse_df_ignores_malformed_sizes(self) -> None:
        self.assertEqual(external.parse_docker_df("Images\t1GB\t..GB\nContainers\t1MB\t1MB\n"), 1024**2)


class TestRunCmd(unittest.TestCase):
    def test_success(self) -> None:
        with mock.patch.object(external.subprocess, "run") as run:
            self.assertEqual(external._run_cmd(["true"]), (True, ""))
            self.assertFalse(run.call_args.kwargs.get("shell", False))

    def test_nonzero_exit_reports_stderr(self) -> None:
        err = subprocess.CalledProcessError(2, ["brew"], stderr="Error: locked\n")
        with mock.patch.object(external.subprocess, "run", side_effect=err):
            self.assertEqual(external._run_cmd(["brew"]), (False, "Error: locked"))

    def test_nonzero_exit_without_output(self) -> None:
        err = subprocess.CalledProcessError(3, ["x"])
        with mock.patch.object(external.subprocess, "run", side_effect=err):
            self.assertEqual(external._run_cmd(["x"]), (False, "exit code 3"))

    def test_missing_binary_and_timeout(self) -> None:
        for exc in (FileNotFoundError("no such file"), subprocess.TimeoutExpired(["x"], 1)):
            with mock.patch.object(external.subprocess, "run", side_effect=exc):
                ok, msg = external._run_cmd(["x"])
                self.assertFalse(ok)
                self.assertTrue(msg)


class TestProbes(unittest.TestCase):
    def test_tools_missing(self) -> None:
        with mock.patch.object(external, "_find_tool", return_value=None):
            self.assertFalse(external.homebrew_installed())
            self.assertFalse(external.docker_installed())

    def test_xcode_probe_uses_xcode_select(self) -> None:
        with mock.patch.object(external.os.path, "exists", return_value=False), \
                mock.patch.object(external, "_run_cmd", return_value=(False, "not found")) as run:
            self.assertFalse(external.xcode_installed())
            run.assert_called_once_with(["xcode-select", "-p"], timeout=5)


class TestBrewCleanup(unittest.TestCase):
    def test_freed_is_cache_shrinkage(self) -> None:
        brew = external.BrewCleanup(["/cache"])
        with mock.patch.object(external, "find_brew", return_value="/opt/homebrew/bin/brew"), \
                mock.patch.object(external, "size_of", side_effect=[5000, 1000]), \
                mock.patch.object(external, "_run_cmd", return_value=(True, "")) as run:
            result = brew.run()
        run.assert_called_once_with(["/opt/homebrew/bin/brew", "cleanup", "-s"], timeout=300)
        self.assertTrue(result.ok)
        self.assertEqual(result.freed_bytes, 4000)

    def test_failure_carries_error(self) -> None:
        brew = external.BrewCleanup([])
        with mock.patch.object(external, "find_brew", return_value="brew"), \
                mock.patch.object(external, "_run_cmd", return_value=(False, "boom")):
            result = brew.run()
        self.assertFalse(result.ok)
        self.assertIn("boom", result.message)

    def test_not_found(self) -> None:
        with mock.patch.object(external, "find_brew", return_value=None):
            self.assertFalse(external.BrewCleanup([]).run().ok)


class TestDockerPrune(unittest.TestCase):
    def test_estimate_without_docker(self) -> None:
        with mock.patch.object(external, "find_docker", return_value=None):
            self.assertEqual(external.DockerPrune().estimate(), 0)

    def test_estimate_reads_df(self) -> None:
        with mock.patch.object(external, "find_docker", return_value="docker"), \
                mock.patch.object(external.subprocess, "check_output", return_value=DF):
            self.assertEqual(external.DockerPrune().estimate(), external.parse_docker_df(DF))


class TestRamPurge(unittest.TestCase):
    def test_purge_frees_no_disk(self) -> None:
        purge = external.RamPurge()
        purge.settle_seconds = 0
        summaries = [{"Pages inactive": 1000}, {"Pages inactive": 400}]
        with mock.patch.object(external.memory, "vm_stat_summary", side_effect=summaries), \
                mock.patch.object(external, "_run_cmd", return_value=(True, "")):
            result = purge.run()
        self.assertTrue(result.ok)
        self.assertEqual(result.freed_bytes, 0)
        self.assertIn("2.3 MB", result.message)

    def test_permission_failure(self) -> None:
        purge = external.RamPurge()
        with mock.patch.object(external.memory, "vm_stat_summary", return_value={}), \
                mock.patch.object(external, "_run_cmd", return_value=(False, "sudo: a password is required")):
            result = purge.run()
        self.assertFalse(result.ok)
        self.assertIn("sudo", result.message)
