"""Path and tool constants for mac-cleanup."""

import pathlib

HOME = str(pathlib.Path.home())

# Roots searched for node_modules and Python caches (relative to HOME)
PROJECT_SEARCH_DIRS = ["Desktop", "Documents", "Developer", "Projects"]
NODE_MODULES_MAX_DEPTH = 4
PYTHON_CACHE_MAX_DEPTH = 5
PYTHON_CACHE_EXTENSIONS = (".pyc", ".pyo")

# Never descended by the recursive finder
FINDER_DENYLIST = frozenset({"Library"})

XCODE_APP = "/Applications/Xcode.app"
BREW_PATHS = ["/opt/homebrew/bin/brew", "/usr/local/bin/brew"]
BREW_CACHE_DIRS = ["/Library/Caches/Homebrew", f"{HOME}/Library/Caches/Homebrew"]
DOCKER_PATHS = [
    "/usr/local/bin/docker",
    "/opt/homebrew/bin/docker",
    "/Applications/Docker.app/Contents/Resources/bin/docker",
]
PURGE_PATH = "/usr/sbin/purge"

PAGE_SIZE = 4096
