from __future__ import annotations

import pytest

from gradlegraph.config import FetchPolicy, GitHubConfig
from gradlegraph.github import RateLimitTracker, ResilientFetcher
from tests._fixtures.github_stub import FakeGitHub, RecordingSleep


@pytest.fixture
def github() -> FakeGitHub:
    """Provide a fresh scripted GitHub transport."""
    return FakeGitHub()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fetcher(github: FakeGitHub, sleeper: RecordingSleep) -> ResilientFetcher:
    """A fetcher wired to the fake transport with a frozen clock."""
    return ResilientFetcher(
        RateLimitTracker(),
        policy=FetchPolicy(),
        github=GitHubConfig(),
        transport=github,
        sleep=sleeper,
        clock=lambda: 1_700_000_000.0,
    )
