#!/usr/bin/env python3
"""External cleanups (brew, docker, purge) and tool presence probes."""
import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.constants import (
    BREW_CACHE_DIRS,
    BREW_PATHS,
    DOCKER_PATHS,
    PAGE_SIZE,
    PURGE_PATH,
    XCODE_APP,
)
from ..utils.disk import human_size, size_of
from ..utils import memory


def _run_cmd(args: list, timeout: int = 10) -> Tuple[bool, str]:
    """Run command with list args (no shell). Returns (success, error_message)."""
    try:
        subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
        return True, ""
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or "").strip() or f"exit code {e.returncode}"
        return False, err
    except (subprocess.TimeoutExpired, OSError) as e:
        return False, str(e)


def _find_tool(name: str, candidates: List[str]) -> Optional[str]:
    for p in candidates:
        if os.path.isfile(p) and os.access(p, os.X_OK):
            return p
    return shutil.which(name)


def find_brew() -> Optional[str]:
    return _find_tool("brew", BREW_PATHS)


def find_docker() -> Optional[str]:
    return _find_tool("docker", DOCKER_PATHS)


def xcode_installed() -> bool:
    if os.path.exists(XCODE_APP):
        return True
    ok, _ = _run_cmd(["xcode-select", "-p"], timeout=5)
    return ok


def homebrew_installed() -> bool:
    brew = find_brew()
    if not brew:
        return False
    ok, _ = _run_cmd([brew, "--version"], timeout=10)
    return ok


def docker_installed() -> bool:
    docker = find_docker()
    if not docker:
        return False
    ok, _ = _run_cmd([docker, "--version"], timeout=10)
    return ok


@dataclass(frozen=True)
class ExternalResult:
    ok: bool
    message: str = ""
    freed_bytes: int = 0


class ExternalCleanup:
    """Cleanup delegated to an external command whose own logic is opaque."""

    description = ""

    def estimate(self) -> int:
        return 0

    def run(self) -> ExternalResult:
        raise NotImplementedError


class BrewCleanup(ExternalCleanup):
    description = "brew cleanup -s"

    def __init__(self, cache_dirs: Optional[List[str]] = None):
        self.cache_dirs = cache_dirs if cache_dirs is not None else BREW_CACHE_DIRS

    def estimate(self) -> int:
        return sum(size_of(p) for p in self.cache_dirs)

    def run(self) -> ExternalResult:
        brew = find_brew()
        if not brew:
            return ExternalResult(False, "Homebrew not found")
        before = self.estimate()
        ok, err = _run_cmd([brew, "cleanup", "-s"], timeout=300)
        if not ok:
            return ExternalResult(False, f"brew cleanup failed: {err}")
        freed = max(before - self.estimate(), 0)
        return ExternalResult(True, f"Homebrew cleanup completed, freed approximately {human_size(freed)}", freed)


def parse_docker_size(s: str) -> int:
    s = (s or "").strip()
    m = re.match(r"([\d.]+)\s*(B|KB|MB|GB|TB|kB)", s, re.I)
    if not m:
        return 0
    try:
        val = float(m.group(1))
    except ValueError:
        return 0
    u = (m.group(2) or "").upper()
    mult = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3, "TB": 1024**4}
    return int(val * mult.get(u, 1))


def parse_docker_df(out: str) -> int:
    """Sum the Reclaimable column of `docker system df --format` output."""
    total = 0
    valid = {"images", "containers", "local volumes", "build cache"}
    for line in out.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        kind = (parts[0] or "").strip().lower()
        if kind not in valid:
            continue
        total += parse_docker_size(parts[2])
    return total


class DockerPrune(ExternalCleanup):
    description = "docker system prune -a -f --volumes"

    def estimate(self) -> int:
        docker = find_docker()
        if not docker:
            return 0
        try:
            out = subprocess.check_output(
                [docker, "system", "df", "--format", "{{.Type}}\t{{.Size}}\t{{.Reclaimable}}"],
                text=True,
                timeout=30,
                stderr=subprocess.DEVNULL,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
            return 0
        return parse_docker_df(out)

    def run(self) -> ExternalResult:
        docker = find_docker()
        if not docker:
            return ExternalResult(False, "Docker not found or not in PATH")
        before = self.estimate()
        ok, err = _run_cmd([docker, "system", "prune", "-a", "-f", "--volumes"], timeout=600)
        if not ok:
            return ExternalResult(False, f"docker system prune failed: {err}")
        return ExternalResult(True, f"Docker cleanup completed, freed approximately {human_size(before)}", before)


class RamPurge(ExternalCleanup):
    """Purge inactive memory. Frees RAM, not disk: freed_bytes stays 0."""

    description = "sudo purge"
    settle_seconds = 2

    def run(self) -> ExternalResult:
        before = memory.vm_stat_summary().get("Pages inactive", 0)
        if os.geteuid() == 0:
            ok, err = _run_cmd([PURGE_PATH], timeout=60)
        else:
            ok, err = _run_cmd(["sudo", PURGE_PATH], timeout=60)
        if not ok:
            if "Operation not permitted" in err or "Permission denied" in err or "sudo" in err.lower():
                return ExternalResult(False, "Failed to purge RAM - may need sudo privileges")
            return ExternalResult(False, f"Failed to purge RAM: {err or 'purge failed'}")
        time.sleep(self.settle_seconds)
        after = memory.vm_stat_summary().get("Pages inactive", 0)
        # assume everything inactive went if the count did not drop
        freed_pages = before - after if before > after else before
        freed = freed_pages * PAGE_SIZE
        return ExternalResult(True, f"RAM purged successfully! Freed approximately {human_size(freed)}")
