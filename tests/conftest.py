import pytest

from fakes import FakeDecls, FakeEnvironment


@pytest.fixture
def env():
    return FakeEnvironment()


@pytest.fixture
def decls(env):
    return FakeDecls(env=env)
