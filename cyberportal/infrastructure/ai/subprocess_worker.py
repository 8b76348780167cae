import json
import logging
import os
import subprocess
from typing import Any, Optional, Sequence

from ...config import settings
from ...application.ports.ai_worker import AIWorker
from ...exceptions import AIWorkerError

logger = logging.getLogger(__name__)


class SubprocessAIWorker(AIWorker):
    """Runs an AI model script as a child process speaking JSON over stdin/stdout."""

    def __init__(self, python: Optional[str] = None, scripts_dir: Optional[str] = None, timeout: Optional[float] = None):
        self.python = python or settings.AI_PYTHON
        self.scripts_dir = scripts_dir or settings.AI_SCRIPTS_DIR
        self.timeout = timeout or settings.AI_TIMEOUT_SECONDS

    def invoke(self, script: str, payload: Any = None, args: Sequence[str] = (), allow_text: bool = False) -> Any:
        script_path = os.path.join(self.scripts_dir, script)
        if payload is None:
            stdin = None
        elif isinstance(payload, str):
            stdin = payload
        else:
            stdin = json.dumps(payload)

        try:
            completed = subprocess.run(
                [self.python, script_path, *args],
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"AI script {script} timed out after {self.timeout}s")
            raise AIWorkerError(f"{script} timed out")
        except OSError as e:
            logger.error(f"AI script {script} could not be started: {e}")
            raise AIWorkerError(f"{script} could not be started")

        if completed.returncode != 0:
            logger.error(f"AI script {script} exited with code {completed.returncode}: {completed.stderr.strip()}")
            raise AIWorkerError(f"{script} exited with code {completed.returncode}")

        output = completed.stdout
        try:
            return json.loads(output)
        except json.JSONDecodeError:
            if allow_text:
                return {"text": output.strip()}
            logger.error(f"AI script {script} produced non-JSON output")
            raise AIWorkerError(f"Failed to parse {script} output")
