"""Dream interpretation context window data structure."""

from dataclasses import dataclass, field
from typing import Optional, List, Dict


@dataclass
class InterpretationContextWindow:
    """Container for everything the interpretation prompt is built from."""

    # Core dream data
    user_id: str
    dream_text: str

    # Optional context
    sleep_hours: Optional[float] = None
    recent_dream_count: int = 0
    recurring_symbols: List[str] = field(default_factory=list)
    common_themes: List[str] = field(default_factory=list)
    frequent_emotions: List[str] = field(default_factory=list)

    def to_llm_messages(self, system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        """Convert context window to LLM-ready messages."""
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

    def sleep_context(self) -> str:
        if not self.sleep_hours:
            return ""
        hours = self.sleep_hours
        if hours < 6:
            note = "Relatively little sleep, which may influence dream content and recall."
        elif hours > 9:
            note = "More sleep than average, which may affect dream vividness and complexity."
        else:
            note = "Normal amount of sleep."
        return f"Sleep Context: {hours:g} hours of sleep. {note}"

    def dream_patterns_context(self) -> str:
        parts = []
        if self.recurring_symbols:
            parts.append(f"Recurring symbols: {', '.join(self.recurring_symbols)}")
        if self.common_themes:
            parts.append(f"Common themes: {', '.join(self.common_themes)}")
        if self.frequent_emotions:
            parts.append(f"Frequent emotions: {', '.join(self.frequent_emotions)}")
        if not parts:
            return ""
        return f"Dream History (last {self.recent_dream_count} dreams): " + ". ".join(parts) + "."

    def estimate_tokens(self) -> int:
        """Rough estimate of token count for context management."""
        total_chars = len(self.dream_text or "")
        total_chars += len(self.sleep_context())
        total_chars += len(self.dream_patterns_context())
        return total_chars // 4
