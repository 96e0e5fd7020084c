from __future__ import annotations

from tempadmin.core.notify import DialogNotifier


def test_dialog_script_quotes_user_text(runner):
    n = DialogNotifier(runner=runner)
    n.notify(title='Admin "now"', message="Back\\slash", button="OK")

    argv = runner.calls[0]
    assert argv[:2] == ["/usr/bin/osascript", "-e"]
    assert argv[2] == (
        'display dialog "Back\\\\slash" with title "Admin \\"now\\"" '
        'buttons {"OK"} default button 1 with icon caution'
    )
