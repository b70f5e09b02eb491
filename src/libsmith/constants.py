# src/libsmith/constants.py
"""Central constants used across the project."""

from typing import Any

from .meta import PROGRAM_CONFIG


# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"
DEFAULT_ENV_WATCH_INTERVAL: str = "WATCH_INTERVAL"
DEFAULT_ENV_PACKAGE: str = "PACKAGE"  # build a single package of a monorepo
DEFAULT_ENV_MONOREPO: str = "LERNA"  # "none" disables monorepo detection
MONOREPO_DISABLED_VALUE: str = "none"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_WATCH_INTERVAL: float = 1.0  # seconds
DEFAULT_STRICT_CONFIG: bool = True

# --- config files (first match wins) ---
CONFIG_FILES: list[str] = [
    f".{PROGRAM_CONFIG}rc.py",
    f".{PROGRAM_CONFIG}rc.toml",
    f".{PROGRAM_CONFIG}rc.jsonc",
    f".{PROGRAM_CONFIG}rc.json",
    # deprecated
    f"{PROGRAM_CONFIG}.config.py",
    f"{PROGRAM_CONFIG}.config.json",
]
DEPRECATED_CONFIG_FILES: set[str] = {
    f"{PROGRAM_CONFIG}.config.py",
    f"{PROGRAM_CONFIG}.config.json",
}

# --- package layout ---
MANIFEST_FILE: str = "package.json"
MONOREPO_MANIFEST_FILE: str = "lerna.json"
PACKAGES_DIR: str = "packages"
SOURCE_DIR: str = "src"
TSCONFIG_FILE: str = "tsconfig.json"
SCOPE_PREFIX: str = "@"
ENTRY_CANDIDATES: list[str] = [
    "src/index.tsx",
    "src/index.ts",
    "src/index.jsx",
    "src/index.js",
]

# --- formats ---
FORMAT_ORDER: tuple[str, ...] = ("umd", "cjs", "esm")
STRATEGY_BUNDLE: str = "bundle"
STRATEGY_PER_FILE: str = "per-file"
# shorthand names accepted in config and on the command line
STRATEGY_ALIASES: dict[str, str] = {
    "bundle": STRATEGY_BUNDLE,
    "rollup": STRATEGY_BUNDLE,
    "per-file": STRATEGY_PER_FILE,
    "per_file": STRATEGY_PER_FILE,
    "babel": STRATEGY_PER_FILE,
}
DEFAULT_STRATEGY: str = STRATEGY_BUNDLE

# per-file output directories, bundles always go to BUNDLE_DIR
OUTPUT_DIRS: dict[str, str] = {"esm": "es", "cjs": "lib"}
BUNDLE_DIR: str = "dist"
SCRIPT_EXTENSION: str = ".js"
STYLESHEET_OUTPUT_EXTENSION: str = ".css"

DEFAULT_TARGET: str = "browser"
TARGETS: set[str] = {"browser", "node"}
DEFAULT_NODE_VERSION: int = 6

# runtime helpers need this dependency in the package manifest
RUNTIME_HELPERS_DEPENDENCY: str = "@babel/runtime"

# --- default compiler options when no tsconfig.json is found ---
DEFAULT_COMPILER_OPTIONS: dict[str, Any] = {
    "target": "esnext",
    "moduleResolution": "node",
    "jsx": "preserve",
    "declaration": True,
    "esModuleInterop": True,
    "skipLibCheck": True,
}

# --- external tools ---
# Each tool runs with the source on stdin and prints the result on stdout.
# Override any of them with the root config `tools` key.
DEFAULT_TOOLS: dict[str, dict[str, Any]] = {
    "typescript": {
        "command": "npx",
        "args": ["--no-install", "esbuild", "--loader=tsx", "--format=esm"],
    },
    "stylesheet": {
        "command": "npx",
        "args": ["--no-install", "lessc", "-"],
    },
    "transformer": {
        "command": "npx",
        "args": ["--no-install", "babel"],
    },
    "bundler": {
        "command": "npx",
        "args": ["--no-install", "rollup"],
    },
    "docs": {
        "command": "npx",
        "args": ["--no-install", "storybook"],
    },
    "publisher": {
        "command": "npx",
        "args": ["--no-install", "gh-pages"],
    },
}
DEFAULT_DOC_PORT: int = 9001
DEFAULT_DOC_DIR: str = ".doc"  # static site output
DEFAULT_DOC_CONFIG_DIR: str = ".storybook"
