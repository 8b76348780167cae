from dataclasses import dataclass
from typing import Any, Dict

from ..ports.ai_worker import AIWorker
from ...exceptions import ValidationError

TEXT_EXTRACTORS = {
    "pdf": "summarizer/pdf_to_text.py",
    "image": "summarizer/image_to_text.py",
    "audio": "summarizer/audio_to_text.py",
    "video": "summarizer/video_to_text.py",
}


@dataclass
class AIService:
    """Named operations over the out-of-process model scripts."""

    worker: AIWorker

    def analyze_complaint(self, complaint: Dict[str, Any]) -> Any:
        return self.worker.invoke("summarizer/summarizer.py", complaint, args=("analyze",))

    def check_similarity(self, entity: Dict[str, Any]) -> Any:
        return self.worker.invoke("database_similarity/database.py", entity, args=("check_similarity",))

    def chat(self, query: str, context: str = "") -> Any:
        return self.worker.invoke("chatbot/chatbot.py", {"query": query, "context": context}, args=("chat",))

    def extract_text(self, file_path: str, file_type: str) -> Any:
        script = TEXT_EXTRACTORS.get((file_type or "").lower())
        if script is None:
            raise ValidationError(f"Unsupported file type: {file_type}")
        return self.worker.invoke(script, args=(file_path,), allow_text=True)

    def classify(self, content: str) -> Any:
        return self.worker.invoke("summarizer/classifier.py", content, args=("classify",))
