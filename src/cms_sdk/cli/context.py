"""Per-invocation collaborators handed to each command workflow."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, TextIO

from cms_sdk.cli.config import CLIConfig
from cms_sdk.cli.prompts import Prompter


@dataclass
class CommandContext:
    client: Any
    config: CLIConfig
    prompter: Prompter
    stdout: TextIO
    faucet: Callable[..., str]
    as_json: bool = False

    def print_reply(self, reply: Any) -> None:
        if hasattr(reply, "model_dump"):
            reply = reply.model_dump(by_alias=True)
        if self.as_json:
            print(json.dumps(reply, sort_keys=True), file=self.stdout)
        else:
            print(json.dumps(reply, sort_keys=True, indent=2), file=self.stdout)

    def status(self, message: str) -> None:
        print(message, file=self.stdout)
