from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

from tempadmin.core.commands import CommandRunner
from tempadmin.core.config import ConfigManager, GrantConfig, TempAdminFsPaths
from tempadmin.core.directory import DirectoryService
from tempadmin.core.errors import ConfigError, NoValidUserError, PrivilegeRequiredError
from tempadmin.core.grant import TemporaryAdminGrantor, grant_status
from tempadmin.core.launchd import LaunchdScheduler
from tempadmin.core.log_archive import LogCollector
from tempadmin.core.logger import setup_logging
from tempadmin.core.notify import DialogNotifier
from tempadmin.core.ops_log import OpsLogger
from tempadmin.core.revoke import RevocationAgent
from tempadmin.core.security import require_root

EXIT_OK = 0
EXIT_FAILED = 1


@dataclass
class Services:
    cfg: GrantConfig
    fs: TempAdminFsPaths
    runner: CommandRunner
    directory: DirectoryService
    scheduler: LaunchdScheduler
    ops_log: OpsLogger


def build_services(fs: TempAdminFsPaths, cfg: GrantConfig, *, logger: Optional[logging.Logger] = None) -> Services:
    runner = CommandRunner(timeout_seconds=cfg.command_timeout_seconds, logger=logger)
    return Services(
        cfg=cfg,
        fs=fs,
        runner=runner,
        directory=DirectoryService(runner=runner, logger=logger),
        scheduler=LaunchdScheduler(runner=runner, logger=logger),
        ops_log=OpsLogger(path=fs.ops_log),
    )


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tempadmin",
        description="Grant the console user temporary admin rights and schedule their removal.",
    )
    ap.add_argument("command", nargs="?", default="grant", choices=["grant", "revoke", "status"])
    ap.add_argument("--config", default=None, help="Path to the JSON config file.")
    ap.add_argument("--root", default="/", help="Filesystem root for all fixed paths.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug detail, including every OS command run.")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    # The agent script replays these under launchd, whose working directory is /.
    root = os.path.abspath(args.root)
    config_path = os.path.abspath(args.config) if args.config else None
    try:
        if args.command in {"grant", "revoke"}:
            require_root(args.command)
        cm = ConfigManager(fs=TempAdminFsPaths(root=root), config_path=config_path)
        cfg = cm.load()
        fs = cm.paths()
        if args.command == "status":
            return _status(fs, cfg)
        logger = setup_logging(fs.log_dir, level=logging.DEBUG if args.verbose else logging.INFO)
        svc = build_services(fs, cfg, logger=logger)
        if args.command == "grant":
            return _grant(svc, config_path=config_path, logger=logger)
        return _revoke(svc, logger=logger)
    except (NoValidUserError, PrivilegeRequiredError, ConfigError) as e:
        logger = logging.getLogger("tempadmin")
        if logger.handlers:
            logger.error("%s", e.user_message)
        else:
            print(e.user_message, file=sys.stderr)
        return EXIT_FAILED


def _grant(svc: Services, *, config_path: Optional[str], logger: logging.Logger) -> int:
    grantor = TemporaryAdminGrantor(
        cfg=svc.cfg,
        fs=svc.fs,
        directory=svc.directory,
        notifier=DialogNotifier(runner=svc.runner),
        scheduler=svc.scheduler,
        ops_log=svc.ops_log,
        config_path=config_path,
        logger=logger,
    )
    res = grantor.grant()
    logger.info("Admin rights for %s will be removed at %s.", res.user, res.revoke_at)
    return EXIT_OK


def _revoke(svc: Services, *, logger: logging.Logger) -> int:
    collector = LogCollector(
        runner=svc.runner,
        archive_dir=svc.fs.log_archive_dir,
        timeout_seconds=svc.cfg.log_collect_timeout_seconds,
        logger=logger,
    )
    agent = RevocationAgent(
        cfg=svc.cfg,
        fs=svc.fs,
        directory=svc.directory,
        scheduler=svc.scheduler,
        collector=collector,
        ops_log=svc.ops_log,
        logger=logger,
    )
    agent.run()
    return EXIT_OK


def _status(fs: TempAdminFsPaths, cfg: GrantConfig) -> int:
    svc = build_services(fs, cfg)
    st = grant_status(cfg=cfg, fs=fs, directory=svc.directory, scheduler=svc.scheduler)
    print(json.dumps(st, indent=2, sort_keys=True))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
