# tests/utils/fakes.py
"""In-memory stand-ins for the external compilers.

Every fake is deterministic: the same input always produces the same
output, so tests can compare files byte for byte.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import libsmith.tools as mod_tools


# a source containing this marker fails to compile
FAIL_MARKER = "SYNTAX ERROR"


@dataclass
class FakeTypeChecker:
    calls: list[str] = field(default_factory=list)

    def compile(
        self, source: str, *, compiler_options: Mapping[str, Any], rel_path: str
    ) -> str:
        self.calls.append(rel_path)
        if FAIL_MARKER in source:
            xmsg = f"{rel_path}: type error"
            raise ValueError(xmsg)
        return f"// checked\n{source}"


@dataclass
class FakeStylesheet:
    calls: list[str] = field(default_factory=list)

    def convert(
        self, source: str, *, options: Mapping[str, Any], rel_path: str
    ) -> str:
        self.calls.append(rel_path)
        return f"/* css */\n{source}"


@dataclass
class FakeTransformer:
    calls: list[tuple[str, mod_tools.TransformOptions]] = field(default_factory=list)

    def transform(
        self, source: str, *, options: mod_tools.TransformOptions, filename: str
    ) -> str:
        self.calls.append((filename, options))
        if FAIL_MARKER in source:
            xmsg = f"Unexpected token in {filename}"
            raise SyntaxError(xmsg)
        runtime = "browser" if options.is_browser else "node"
        return f"// {options.module_format} {runtime}\n{source}"


@dataclass
class FakeBundler:
    requests: list[mod_tools.BundleRequest] = field(default_factory=list)
    watched: list[bool] = field(default_factory=list)
    fail: bool = False
    closed: int = 0

    def bundle(self, request: mod_tools.BundleRequest, *, watch: bool) -> None:
        self.requests.append(request)
        self.watched.append(watch)
        if self.fail:
            xmsg = "bundler crashed"
            raise RuntimeError(xmsg)
        request.output_path.parent.mkdir(parents=True, exist_ok=True)
        request.output_path.write_text(
            f"// {request.module_format} bundle of {', '.join(request.entry)}\n",
            encoding="utf-8",
        )

    def close(self) -> None:
        self.closed += 1

    @property
    def formats(self) -> list[str]:
        return [r.module_format for r in self.requests]


@dataclass
class FakeDocs:
    requests: list[mod_tools.DocRequest] = field(default_factory=list)

    def run(self, request: mod_tools.DocRequest) -> None:
        self.requests.append(request)


def make_fake_collaborators() -> mod_tools.Collaborators:
    return mod_tools.Collaborators(
        type_checker=FakeTypeChecker(),
        stylesheet=FakeStylesheet(),
        transformer=FakeTransformer(),
        bundler=FakeBundler(),
        docs=FakeDocs(),
    )
