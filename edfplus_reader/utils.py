from datetime import datetime
from typing import Optional


class Logger:
    def __init__(self, debug: bool = False) -> None:
        self._debug = debug

    def set_debug(self, debug: bool) -> None:
        self._debug = debug

    @staticmethod
    def log(level: str, msg: str, identifier: Optional[str] = None) -> None:
        print(
            f"[{datetime.now()}][{level}]{f'[{identifier}]' if identifier else ''} {msg}"
        )

    def error(self, msg: str, identifier: Optional[str] = None) -> None:
        self.log("ERROR", msg, identifier)

    def debug(self, msg: str, identifier: Optional[str] = None) -> None:
        if self._debug:
            self.log("DEBUG", msg, identifier)


LOGGER = Logger()


def is_truthy(value: Optional[str]) -> bool:
    return (value or "false").lower() in ("true", "1", "t", "y", "yes")
