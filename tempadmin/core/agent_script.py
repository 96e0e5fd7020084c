from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Optional

from tempadmin.core.config.io import atomic_write_text, remove_if_exists

_TEMPLATE = """#!{python}
# Generated by tempadmin at {generated_at}. Runs once from launchd to revoke
# the temporary admin grant, then unregisters itself.
import sys

from tempadmin.cli import main

sys.exit(main({argv}))
"""


@dataclass(frozen=True)
class RevocationAgentScript:
    """The executable launchd invokes when the grant expires."""

    path: str
    python: str
    root: str = "/"
    config_path: Optional[str] = None

    def argv(self) -> List[str]:
        out = ["revoke", "--root", self.root]
        if self.config_path:
            out += ["--config", self.config_path]
        return out

    def program_arguments(self) -> List[str]:
        return [self.python, self.path]

    def render(self, *, generated_at: str) -> str:
        # json.dumps yields a valid Python list literal for a list of str.
        return _TEMPLATE.format(python=self.python, generated_at=generated_at, argv=json.dumps(self.argv()))

    def write(self, *, generated_at: str) -> None:
        atomic_write_text(self.path, self.render(generated_at=generated_at), mode=0o755)

    def remove(self) -> bool:
        return remove_if_exists(self.path)
