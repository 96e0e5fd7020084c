from __future__ import annotations

import os
import stat

import pytest

from tempadmin.core.errors import InvalidUsernameError
from tempadmin.core.marker import SessionMarker


def test_write_read_clear(tmp_path):
    m = SessionMarker(str(tmp_path / "userToRemove" / "user"))
    assert m.read() is None
    m.write("alice")
    assert m.exists()
    assert m.read() == "alice"
    assert stat.S_IMODE(os.stat(m.path).st_mode) == 0o600
    assert m.clear() is True
    assert m.clear() is False


def test_write_overwrites_previous_user(tmp_path):
    m = SessionMarker(str(tmp_path / "user"))
    m.write("alice")
    m.write("bob")
    with open(m.path, "r", encoding="utf-8") as f:
        assert f.read() == "bob\n"


def test_legacy_appended_marker_uses_last_line(tmp_path):
    path = tmp_path / "user"
    path.write_text("alice\nbob\n", encoding="utf-8")
    assert SessionMarker(str(path)).read() == "bob"


def test_invalid_content_reads_as_none(tmp_path):
    path = tmp_path / "user"
    path.write_text("\n\n", encoding="utf-8")
    assert SessionMarker(str(path)).read() is None
    path.write_text("$(whoami)\n", encoding="utf-8")
    assert SessionMarker(str(path)).read() is None


def test_refuses_to_write_invalid_username(tmp_path):
    with pytest.raises(InvalidUsernameError):
        SessionMarker(str(tmp_path / "user")).write("bad user")
