"""
Question answering over the restaurant info text.

The tool layer only needs something with ``async generate(prompt) -> str``;
LLMAnswerGenerator is the default, backed by any OpenAI-compatible chat
endpoint through langchain.
"""
from typing import Any, List, Optional, Protocol, Union

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from logger_config import get_logger
from restaurant_config import Settings

logger = get_logger()

NO_ANSWER_TEXT = "I couldn't generate an answer."


class AnswerGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


def build_answer_prompt(info_text: str, question: str) -> str:
    return "\n".join([
        "You are a helpful restaurant assistant. Answer the user's question based ONLY on the following context. "
        "If the answer is not in the context, say \"I'm sorry, I don't have that information.\"",
        "",
        f"Context: \"{info_text}\"",
        "",
        f"Question: \"{question}\"",
        "",
        "Answer:",
    ])


def _content_text(content: Union[str, List[Any]]) -> str:
    """Flatten message content, which some providers return as a list of blocks."""
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text":
            parts.append(str(block.get("text") or ""))
    return "".join(parts)


class LLMAnswerGenerator:
    def __init__(self, settings: Settings, llm: Optional[ChatOpenAI] = None) -> None:
        self.settings = settings
        self._llm = llm

    @property
    def llm(self) -> ChatOpenAI:
        # Built on first use so a missing API key only matters once someone asks a question.
        if self._llm is None:
            self._llm = ChatOpenAI(
                api_key=self.settings.llm_api_key,
                base_url=self.settings.llm_base_url,
                model=self.settings.llm_model,
                temperature=self.settings.llm_temperature,
                max_tokens=self.settings.llm_max_tokens,
            )
        return self._llm

    async def generate(self, prompt: str) -> str:
        logger.info(f"LLM request: model={self.settings.llm_model} prompt_chars={len(prompt)}")
        response = await self.llm.ainvoke([HumanMessage(content=prompt)])
        text = _content_text(response.content).strip()
        logger.info(f"LLM response: {text}")
        return text or NO_ANSWER_TEXT
