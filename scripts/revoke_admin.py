from __future__ import annotations

import sys

from tempadmin.cli import main

if __name__ == "__main__":
    raise SystemExit(main(["revoke", *sys.argv[1:]]))
