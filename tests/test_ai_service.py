import sys
import textwrap

import pytest

from cyberportal.application.services.ai_service import AIService
from cyberportal.exceptions import AIWorkerError, ValidationError
from cyberportal.infrastructure.ai.subprocess_worker import SubprocessAIWorker

from conftest import FakeAIWorker


def test_operations_dispatch_to_their_scripts():
    worker = FakeAIWorker(reply={"ok": True})
    ai = AIService(worker=worker)

    ai.analyze_complaint({"description": "fake KYC call"})
    ai.check_similarity({"entity_value": "fraud@okaxis"})
    ai.chat("what is vishing?", context="faq")
    ai.extract_text("/tmp/statement.pdf", "PDF")
    ai.classify("raw complaint text")

    assert worker.calls == [
        ("summarizer/summarizer.py", {"description": "fake KYC call"}, ("analyze",), False),
        ("database_similarity/database.py", {"entity_value": "fraud@okaxis"}, ("check_similarity",), False),
        ("chatbot/chatbot.py", {"query": "what is vishing?", "context": "faq"}, ("chat",), False),
        ("summarizer/pdf_to_text.py", None, ("/tmp/statement.pdf",), True),
        ("summarizer/classifier.py", "raw complaint text", ("classify",), False),
    ]


def test_extract_text_rejects_unknown_type():
    with pytest.raises(ValidationError):
        AIService(worker=FakeAIWorker()).extract_text("/tmp/file.bin", "spreadsheet")


def _script(tmp_path, name, body):
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body))
    return name


@pytest.fixture
def worker(tmp_path):
    return SubprocessAIWorker(python=sys.executable, scripts_dir=str(tmp_path), timeout=30)


def test_subprocess_worker_round_trips_json(worker, tmp_path):
    script = _script(tmp_path, "chatbot/chatbot.py", """
        import json, sys
        payload = json.load(sys.stdin)
        print(json.dumps({"mode": sys.argv[1], "echo": payload["query"]}))
    """)
    assert worker.invoke(script, {"query": "hello"}, args=("chat",)) == {"mode": "chat", "echo": "hello"}


def test_subprocess_worker_passes_raw_text(worker, tmp_path):
    script = _script(tmp_path, "classifier.py", """
        import json, sys
        print(json.dumps({"length": len(sys.stdin.read())}))
    """)
    assert worker.invoke(script, "abcd") == {"length": 4}


def test_subprocess_worker_nonzero_exit(worker, tmp_path):
    script = _script(tmp_path, "broken.py", """
        import sys
        sys.stderr.write("model missing")
        sys.exit(3)
    """)
    with pytest.raises(AIWorkerError):
        worker.invoke(script, {"x": 1})


def test_subprocess_worker_text_output(worker, tmp_path):
    script = _script(tmp_path, "to_text.py", """
        import sys
        print("extracted words from " + sys.argv[1])
    """)
    with pytest.raises(AIWorkerError):
        worker.invoke(script, args=("a.pdf",))
    assert worker.invoke(script, args=("a.pdf",), allow_text=True) == {"text": "extracted words from a.pdf"}


def test_subprocess_worker_missing_interpreter(tmp_path):
    worker = SubprocessAIWorker(python=str(tmp_path / "no-such-python"), scripts_dir=str(tmp_path))
    with pytest.raises(AIWorkerError):
        worker.invoke("anything.py")
