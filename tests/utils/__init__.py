# tests/utils/__init__.py

from .config_validate import make_summary
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT
from .fakes import (
    FAIL_MARKER,
    FakeBundler,
    FakeDocs,
    FakeStylesheet,
    FakeTransformer,
    FakeTypeChecker,
    make_fake_collaborators,
)
from .force_mtime_advance import force_mtime_advance
from .package import make_test_monorepo, make_test_package
from .patch_everywhere import patch_everywhere
from .test_trace import TEST_TRACE, make_test_trace


__all__ = [  # noqa: RUF022
    # config_validate
    "make_summary",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
    # fakes
    "FAIL_MARKER",
    "FakeBundler",
    "FakeDocs",
    "FakeStylesheet",
    "FakeTransformer",
    "FakeTypeChecker",
    "make_fake_collaborators",
    # force_mtime_advance
    "force_mtime_advance",
    # package
    "make_test_monorepo",
    "make_test_package",
    # patch_everywhere
    "patch_everywhere",
    # test_trace
    "TEST_TRACE",
    "make_test_trace",
]
