"""Cleanup categories for mac-cleanup."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from . import config as config_module
from .constants import (
    HOME,
    PROJECT_SEARCH_DIRS,
    PYTHON_CACHE_EXTENSIONS,
)
from .models import CategoryKind, CategoryTarget, RetentionRule
from ..services import external_service as external
from ..services.finder_service import any_of, dir_named, file_with_extension


def search_roots(home: str, cfg: Dict[str, Any]) -> tuple:
    roots = [f"{home}/{d}" for d in PROJECT_SEARCH_DIRS]
    roots.extend(p for p in cfg.get("extra_search_paths") or [] if p not in roots)
    return tuple(roots)


def build_categories(home: str = HOME, cfg: Optional[Dict[str, Any]] = None) -> List[CategoryTarget]:
    """The category table, in run order, with home substituted into every path."""
    if cfg is None:
        cfg = config_module.load()
    user_caches = (f"{home}/Library/Caches", f"{home}/.cache")
    system_caches = ("/Library/Caches", "/System/Library/Caches")
    user_cache_rule = RetentionRule.older_than(cfg["user_cache_days_old"])
    system_cache_rule = RetentionRule.older_than(cfg["system_cache_days_old"])
    projects = search_roots(home, cfg)

    return [
        CategoryTarget(
            key="caches",
            label="📁 System & User Caches",
            kind=CategoryKind.CHILDREN,
            action="Clean system and user caches?",
            roots=user_caches + system_caches,
            rule=user_cache_rule,
            root_rules=tuple((p, system_cache_rule) for p in system_caches),
        ),
        CategoryTarget(
            key="logs",
            label="📝 System Logs",
            kind=CategoryKind.CHILDREN,
            action=f"Clean system logs older than {cfg['logs_days_old']} days?",
            roots=(f"{home}/Library/Logs", f"{home}/.npm/_logs", "/Library/Logs", "/var/log"),
            rule=RetentionRule.older_than(cfg["logs_days_old"]),
        ),
        CategoryTarget(
            key="downloads",
            label="📥 Downloads Folder",
            kind=CategoryKind.CHILDREN,
            action=f"Clean files older than {cfg['downloads_days_old']} days in Downloads?",
            roots=(f"{home}/Downloads",),
            rule=RetentionRule.older_than(cfg["downloads_days_old"]),
        ),
        CategoryTarget(
            key="trash",
            label="🗑️  Trash",
            kind=CategoryKind.CHILDREN,
            action="Empty trash?",
            roots=(f"{home}/.Trash",),
            rule=RetentionRule.full_clear(),
        ),
        CategoryTarget(
            key="xcode",
            label="🛠️  Xcode",
            kind=CategoryKind.CHILDREN,
            action="Clean Xcode derived data and archives?",
            roots=(
                f"{home}/Library/Developer/Xcode/DerivedData",
                f"{home}/Library/Developer/Xcode/Archives",
                f"{home}/Library/Developer/CoreSimulator/Caches",
            ),
            rule=RetentionRule.full_clear(),
            prerequisite=external.xcode_installed,
        ),
        CategoryTarget(
            key="homebrew",
            label="🍺 Homebrew",
            kind=CategoryKind.EXTERNAL,
            action="Clean Homebrew cache and outdated formulae?",
            prerequisite=external.homebrew_installed,
            external=external.BrewCleanup(["/Library/Caches/Homebrew", f"{home}/Library/Caches/Homebrew"]),
            skip_when_empty=False,
        ),
        CategoryTarget(
            key="node_modules",
            label="📦 Node Modules",
            kind=CategoryKind.SEARCH,
            action="Remove all node_modules directories?",
            roots=projects,
            predicate=dir_named("node_modules"),
            max_depth=cfg["node_modules_max_depth"],
        ),
        CategoryTarget(
            key="docker",
            label="🐳 Docker",
            kind=CategoryKind.EXTERNAL,
            action="Clean Docker unused containers, images and volumes?",
            prerequisite=external.docker_installed,
            external=external.DockerPrune(),
            skip_when_empty=False,
        ),
        CategoryTarget(
            key="safari",
            label="🌐 Safari",
            kind=CategoryKind.PATHS,
            action="Clean Safari cache and history?",
            roots=(
                f"{home}/Library/Caches/com.apple.Safari",
                f"{home}/Library/Safari/History.db",
                f"{home}/Library/Safari/TopSites.plist",
                f"{home}/Library/Caches/com.apple.WebKit.PluginProcess",
            ),
        ),
        CategoryTarget(
            key="chrome",
            label="🌐 Chrome Cache",
            kind=CategoryKind.PATHS,
            action="Clean Chrome cache?",
            roots=(f"{home}/Library/Caches/Google/Chrome", f"{home}/Library/Caches/com.google.Chrome"),
        ),
        CategoryTarget(
            key="python_cache",
            label="🐍 Python Cache",
            kind=CategoryKind.SEARCH,
            action="Clean Python cache files?",
            roots=projects,
            predicate=any_of(dir_named("__pycache__"), file_with_extension(*PYTHON_CACHE_EXTENSIONS)),
            max_depth=cfg["python_cache_max_depth"],
        ),
        CategoryTarget(
            key="containers",
            label="📱 App Containers",
            kind=CategoryKind.CHILDREN,
            action="Clean app containers data?",
            roots=(f"{home}/Library/Containers",),
            rule=RetentionRule.older_than(cfg["containers_days_old"]),
        ),
        CategoryTarget(
            key="cookies",
            label="🍪 Browser Cookies & Web Data",
            kind=CategoryKind.CHILDREN,
            action="Clean browser cookies and web data?",
            roots=(
                f"{home}/Library/Cookies",
                f"{home}/Library/HTTPStorages",
                f"{home}/Library/WebKit",
                f"{home}/Library/Safari/LocalStorage",
                f"{home}/Library/Safari/Databases",
                f"{home}/Library/Application Support/Google/Chrome/Default/Cookies",
                f"{home}/Library/Application Support/Google/Chrome/Default/Local Storage",
            ),
            rule=RetentionRule.older_than(0),
        ),
        CategoryTarget(
            key="ram",
            label="🧠 RAM Memory",
            kind=CategoryKind.EXTERNAL,
            action="Clean RAM memory (purge inactive memory)?",
            external=external.RamPurge(),
            skip_when_empty=False,
        ),
    ]


def category_keys(categories: List[CategoryTarget]) -> List[str]:
    return [c.key for c in categories]


def select(categories: List[CategoryTarget], only=None, exclude=None) -> List[CategoryTarget]:
    """Filter the table by key, keeping table order."""
    only = set(only or [])
    exclude = set(exclude or [])
    return [c for c in categories if (not only or c.key in only) and c.key not in exclude]
