# tests/50_core/test_run_build.py

from pathlib import Path

import pytest

import libsmith.build as mod_build
import libsmith.context as mod_context
import libsmith.errors as mod_errors
import libsmith.logs as mod_logs
import libsmith.tools as mod_tools
from tests.utils import (
    FakeBundler,
    FakeDocs,
    make_fake_collaborators,
    make_test_monorepo,
    make_test_package,
)


class _Factory:
    """Collaborator factory that remembers what it handed out."""

    def __init__(self) -> None:
        self.made: list[tuple[Path, mod_tools.Collaborators]] = []

    def __call__(
        self, ctx: mod_context.WorkingContext, _tools: object
    ) -> mod_tools.Collaborators:
        collaborators = make_fake_collaborators()
        self.made.append((ctx.package_path, collaborators))
        return collaborators


def test_run_build_single_package(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(
        tmp_path / "pkg",
        files={"src/index.js": "export default 1;"},
        config={"esm": "per-file", "cjs": "per-file"},
    )
    factory = _Factory()

    # --- execute ---
    built = mod_build.run_build(pkg, {}, env={}, make_collaborators=factory)

    # --- verify ---
    assert len(built) == 1
    assert (pkg / "es" / "index.js").exists()
    assert (pkg / "lib" / "index.js").exists()
    bundler = factory.made[0][1].bundler
    assert isinstance(bundler, FakeBundler)
    assert bundler.closed == 1


def test_run_build_checks_every_variant_first(tmp_path: Path) -> None:
    """Nothing is written when any variant is misconfigured."""
    # --- setup ---
    pkg = make_test_package(
        tmp_path / "pkg",
        files={"src/index.js": ""},
        config=[{"esm": "per-file"}, {"cjs": {"strategy": "bundle", "lazy": True}}],
    )

    # --- execute ---
    with pytest.raises(mod_errors.ConfigConflictError):
        mod_build.run_build(pkg, {}, env={}, make_collaborators=_Factory())

    # --- verify ---
    assert not (pkg / "es").exists()


def test_run_build_cli_args_win(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(
        tmp_path / "pkg",
        files={"src/index.js": ""},
        config={"esm": "per-file"},
    )
    factory = _Factory()

    # --- execute ---
    mod_build.run_build(pkg, {"esm": "rollup"}, env={}, make_collaborators=factory)

    # --- verify ---
    bundler = factory.made[0][1].bundler
    assert isinstance(bundler, FakeBundler)
    assert bundler.formats == ["esm"]
    assert not (pkg / "es").exists()


def test_run_build_applies_config_log_level(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(
        tmp_path / "pkg",
        files={"src/index.js": ""},
        config={"esm": "per-file", "log_level": "warning"},
    )

    # --- execute ---
    mod_build.run_build(pkg, {}, env={}, make_collaborators=_Factory())

    # --- verify ---
    assert mod_logs.get_app_logger().levelName == "WARNING"


def test_run_build_monorepo(tmp_path: Path) -> None:
    # --- setup ---
    root = make_test_monorepo(
        tmp_path / "repo",
        {
            "core": {"src/index.js": "export const core = 1;"},
            "@scope/ui": {"src/index.tsx": "export const ui = 1;"},
        },
        config={"esm": "per-file", "watch_interval": 0.5},
    )
    factory = _Factory()

    # --- execute ---
    built = mod_build.run_build(root, {}, env={}, make_collaborators=factory)

    # --- verify ---
    assert len(built) == 2  # noqa: PLR2004
    assert [path.name for path, _c in factory.made] == ["ui", "core"]
    assert (root / "packages" / "core" / "es" / "index.js").exists()
    assert (root / "packages" / "@scope" / "ui" / "es" / "index.js").exists()


def test_run_build_monorepo_single_package(tmp_path: Path) -> None:
    # --- setup ---
    root = make_test_monorepo(
        tmp_path / "repo",
        {"core": {"src/index.js": ""}, "extra": {"src/index.js": ""}},
        config={"cjs": "per-file"},
    )

    # --- execute ---
    mod_build.run_build(
        root, {}, env={"PACKAGE": "extra"}, make_collaborators=_Factory()
    )

    # --- verify ---
    assert (root / "packages" / "extra" / "lib" / "index.js").exists()
    assert not (root / "packages" / "core" / "lib").exists()


def test_run_build_monorepo_disabled_by_env(tmp_path: Path) -> None:
    """With LERNA=none the root is built as a plain package."""
    # --- setup ---
    root = make_test_monorepo(
        tmp_path / "repo",
        {"core": {"src/index.js": ""}},
        config={"esm": "per-file"},
    )
    (root / "src").mkdir()
    (root / "src" / "index.js").write_text("")

    # --- execute ---
    mod_build.run_build(root, {}, env={"LERNA": "none"}, make_collaborators=_Factory())

    # --- verify ---
    assert (root / "es" / "index.js").exists()
    assert not (root / "packages" / "core" / "es").exists()


def test_run_build_watch_stops_on_interrupt(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(
        tmp_path / "pkg",
        files={"src/index.js": ""},
        config={"esm": "per-file", "umd": True},
    )
    factory = _Factory()

    def fake_sleep(_seconds: float) -> None:
        raise KeyboardInterrupt

    # --- execute ---
    built = mod_build.run_build(
        pkg,
        {},
        watch=True,
        env={},
        make_collaborators=factory,
        sleep=fake_sleep,
    )

    # --- verify ---
    assert len(built) == 1
    bundler = factory.made[0][1].bundler
    assert isinstance(bundler, FakeBundler)
    # the bundler was asked to keep watching on its own
    assert bundler.watched == [True]
    assert bundler.closed == 1


def test_run_doc_dev(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(tmp_path / "pkg")
    factory = _Factory()

    # --- execute ---
    mod_build.run_doc(pkg, "dev", make_collaborators=factory)

    # --- verify ---
    docs = factory.made[0][1].docs
    assert isinstance(docs, FakeDocs)
    [request] = docs.requests
    assert request.mode == "dev"
    assert request.port == 9001  # noqa: PLR2004
    assert request.config_dir == pkg.resolve() / ".storybook"


def test_run_doc_build_has_no_port(tmp_path: Path) -> None:
    # --- setup ---
    pkg = make_test_package(tmp_path / "pkg")
    factory = _Factory()

    # --- execute ---
    mod_build.run_doc(pkg, "build", port=1234, make_collaborators=factory)

    # --- verify ---
    docs = factory.made[0][1].docs
    assert isinstance(docs, FakeDocs)
    assert docs.requests[0].port is None
    assert docs.requests[0].output_path == pkg.resolve() / ".doc"
