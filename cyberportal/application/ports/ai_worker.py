from typing import Any, Protocol, Sequence


class AIWorker(Protocol):
    def invoke(self, script: str, payload: Any = None, args: Sequence[str] = (), allow_text: bool = False) -> Any:
        """Run ``script`` with ``payload`` on stdin and return its parsed JSON output.

        With ``allow_text`` a non-JSON output is returned as ``{"text": ...}``
        instead of failing.
        """
        ...
