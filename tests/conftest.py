from __future__ import annotations

import logging

import pytest

from tempadmin.core.config import GrantConfig, TempAdminFsPaths
from tempadmin.core.directory import DirectoryService
from tempadmin.core.grant import TemporaryAdminGrantor
from tempadmin.core.launchd import LaunchdScheduler
from tempadmin.core.log_archive import LogCollector
from tempadmin.core.notify import DialogNotifier
from tempadmin.core.ops_log import OpsLogger
from tempadmin.core.revoke import RevocationAgent

from .helpers.fakes import FakeClock, FakeRunner, console_session


def _allow(_action: str) -> None:
    return None


@pytest.fixture
def fs(tmp_path):
    """All fixed paths relocated under tmp_path."""
    return TempAdminFsPaths(root=str(tmp_path))


@pytest.fixture
def cfg():
    return GrantConfig(python_executable="/usr/bin/python3")


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def console(monkeypatch):
    """Call with usernames (or FakeSession objects) to set the logged-in sessions."""

    def _set(*sessions):
        items = [console_session(s) if isinstance(s, str) else s for s in sessions]
        monkeypatch.setattr("tempadmin.core.directory.psutil.users", lambda: list(items))

    _set()
    return _set


@pytest.fixture
def logger():
    return logging.getLogger("tempadmin.tests")


@pytest.fixture
def make_grantor(cfg, fs, runner, clock, logger):
    def _make(**overrides):
        kwargs = dict(
            cfg=cfg,
            fs=fs,
            directory=DirectoryService(runner=runner, logger=logger),
            notifier=DialogNotifier(runner=runner),
            scheduler=LaunchdScheduler(runner=runner, logger=logger),
            ops_log=OpsLogger(path=fs.ops_log),
            logger=logger,
            now=clock.time,
            privilege_check=_allow,
        )
        kwargs.update(overrides)
        return TemporaryAdminGrantor(**kwargs)

    return _make


@pytest.fixture
def make_agent(cfg, fs, runner, clock, logger):
    def _make(**overrides):
        kwargs = dict(
            cfg=cfg,
            fs=fs,
            directory=DirectoryService(runner=runner, logger=logger),
            scheduler=LaunchdScheduler(runner=runner, logger=logger),
            collector=LogCollector(runner=runner, archive_dir=fs.log_archive_dir, logger=logger, now=clock.time),
            ops_log=OpsLogger(path=fs.ops_log),
            logger=logger,
        )
        kwargs.update(overrides)
        return RevocationAgent(**kwargs)

    return _make
