from __future__ import annotations

import logging
import plistlib

import pytest
from pydantic import ValidationError

from tempadmin.core.errors import CommandError
from tempadmin.core.launchd import LaunchdScheduler, TimerDescriptor


def _desc(**kw):
    base = dict(label="com.tempadmin.removeAdmin", program_arguments=["/usr/bin/python3", "/x.py"], start_interval=1800)
    base.update(kw)
    return TimerDescriptor(**base)


def test_plist_has_launchd_keys():
    obj = plistlib.loads(_desc(run_at_load=True).to_plist_bytes())
    assert obj == {
        "Label": "com.tempadmin.removeAdmin",
        "ProgramArguments": ["/usr/bin/python3", "/x.py"],
        "StartInterval": 1800,
        "RunAtLoad": True,
    }


def test_descriptor_rejects_empty_program_and_zero_interval():
    with pytest.raises(ValidationError):
        _desc(program_arguments=[])
    with pytest.raises(ValidationError):
        _desc(start_interval=0)


def test_scheduler_write_read_and_remove(tmp_path, runner):
    path = str(tmp_path / "LaunchDaemons" / "com.tempadmin.removeAdmin.plist")
    sched = LaunchdScheduler(runner=runner)
    sched.write(_desc(), path)

    assert sched.read(path) == _desc()
    assert sched.remove(path) is True
    assert sched.read(path) is None


def test_deregister_raises_on_unexpected_failure():
    class Broken:
        def run(self, argv, *, check=True, timeout=None):
            from tempadmin.core.commands import CommandResult

            return CommandResult(argv=list(argv), returncode=5, stderr="input/output error")

    with pytest.raises(CommandError):
        LaunchdScheduler(runner=Broken()).deregister("com.tempadmin.removeAdmin")


@pytest.mark.parametrize(
    "payload",
    [
        b"garbage",
        b"<?xml version='1.0'?><plist><dict><key>Label",
        plistlib.dumps({"ProgramArguments": ["/x.py"], "StartInterval": 60}),
        plistlib.dumps({"Label": "x", "ProgramArguments": ["/x.py"], "StartInterval": 0}),
        plistlib.dumps(["not", "a", "dict"]),
    ],
)
def test_read_treats_unparseable_descriptor_as_absent(tmp_path, runner, caplog, payload):
    path = tmp_path / "com.tempadmin.removeAdmin.plist"
    path.write_bytes(payload)

    logger = logging.getLogger("tests.launchd")
    with caplog.at_level("WARNING", logger="tests.launchd"):
        assert LaunchdScheduler(runner=runner, logger=logger).read(str(path)) is None
    assert "unreadable launchd descriptor" in caplog.text
