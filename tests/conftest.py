"""
Pytest configuration shared by the transition tests.
"""

import pytest

from tests.framework import build_router


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only (trio is not installed)."""
    return "asyncio"


@pytest.fixture
def blog_routes():
    """Route map used across tests: a four-level chain plus a sibling."""
    return {
        "comment": ["application", "posts", "post", "comment"],
        "post": ["application", "posts", "post"],
        "about": ["application", "about"],
    }


@pytest.fixture
def blog(blog_routes):
    """Router, handlers and call log for the blog route map."""
    return build_router(blog_routes)
