from __future__ import annotations

import argparse
import json

from tempadmin.core.config import ConfigManager, TempAdminFsPaths


def main() -> None:
    ap = argparse.ArgumentParser(description="Print the effective tempadmin config")
    ap.add_argument("--config", default=None)
    ap.add_argument("--root", default="/")
    args = ap.parse_args()

    cm = ConfigManager(fs=TempAdminFsPaths(root=args.root), config_path=args.config)
    cfg = cm.load()
    fs = cm.paths()
    out = {
        "config": cfg.model_dump(),
        "paths": {
            "marker": fs.marker,
            "agent_script": fs.agent_script,
            "descriptor": fs.descriptor,
            "log_archive_dir": fs.log_archive_dir,
            "ops_log": fs.ops_log,
        },
    }
    print(json.dumps(out, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
