from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_OPERATION


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_OPERATION

    def __str__(self) -> str:
        return self.message
