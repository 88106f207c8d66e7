"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of msgscan modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("msgscan"):
        del sys.modules[module_name]

from msgscan.parsing.treesitter import TreeSitterParser  # noqa: E402


@pytest.fixture(scope="session")
def parser() -> TreeSitterParser:
    """Shared TreeSitterParser instance."""
    return TreeSitterParser()


@pytest.fixture
def parse_js(parser: TreeSitterParser):
    """Parse JavaScript source and return its root node."""

    def _parse(source: str, language: str = "javascript"):
        return parser.parse(source, language).root_node

    return _parse


@pytest.fixture
def call_args(parse_js):
    """Argument nodes of the first call expression in a snippet."""
    from msgscan.parsing.nodes import call_arguments

    def _args(source: str):
        stack = [parse_js(source)]
        while stack:
            node = stack.pop()
            if node.type == "call_expression":
                return call_arguments(node)
            stack.extend(reversed(node.children))
        raise AssertionError(f"no call in {source!r}")

    return _args
