"""Helpers to inspect macOS memory via vm_stat and sysctl."""
from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Dict, Optional

from ..core.constants import PAGE_SIZE

DEFAULT_TOTAL_RAM = 8 * 1024**3


def _vm_stat_output() -> str:
    try:
        return subprocess.check_output(["vm_stat"], text=True, timeout=10)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError):
        return ""


def parse_vm_stat(out: str) -> Dict[str, int]:
    """Map 'Pages free' style keys to page counts."""
    res = {}
    for line in out.splitlines():
        if ":" not in line:
            continue
        key, val = line.split(":", 1)
        val = val.strip().rstrip(".")
        if not val:
            continue
        try:
            res[key.strip()] = int(val.split()[0])
        except ValueError:
            pass
    return res


def vm_stat_summary() -> Dict[str, int]:
    return parse_vm_stat(_vm_stat_output())


def total_ram_bytes() -> int:
    try:
        out = subprocess.check_output(["sysctl", "-n", "hw.memsize"], text=True, timeout=10)
        return int(out.strip())
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError, ValueError):
        return DEFAULT_TOTAL_RAM


@dataclass(frozen=True)
class RamStatus:
    free: int = 0
    inactive: int = 0
    active: int = 0
    wired: int = 0
    compressed: int = 0
    total: int = DEFAULT_TOTAL_RAM

    @property
    def used(self) -> int:
        return self.active + self.wired + self.compressed

    @property
    def available(self) -> int:
        return self.free + self.inactive

    @classmethod
    def from_pages(cls, pages: Dict[str, int], total: int = DEFAULT_TOTAL_RAM) -> "RamStatus":
        return cls(
            free=pages.get("Pages free", 0) * PAGE_SIZE,
            inactive=pages.get("Pages inactive", 0) * PAGE_SIZE,
            active=pages.get("Pages active", 0) * PAGE_SIZE,
            wired=pages.get("Pages wired down", 0) * PAGE_SIZE,
            compressed=pages.get("Pages occupied by compressor", 0) * PAGE_SIZE,
            total=total,
        )


def ram_status(pages: Optional[Dict[str, int]] = None) -> RamStatus:
    if pages is None:
        pages = vm_stat_summary()
    return RamStatus.from_pages(pages, total_ram_bytes())
