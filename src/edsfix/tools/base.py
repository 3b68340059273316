from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..config.models import BehaviorConfig
from ..llm.azure_openai import GenerationClient

@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: dict[str, Any]   # JSONSchema

    def to_wire(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.parameters}

class Tool(Protocol):
    spec: ToolSpec
    def execute(self, ctx: "ToolContext", args: dict[str, Any]) -> "ToolResult": ...

@dataclass
class ToolResult:
    content: list[dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @staticmethod
    def text(text: str) -> "ToolResult":
        return ToolResult(content=[{"type": "text", "text": text}])

    @staticmethod
    def error(text: str) -> "ToolResult":
        return ToolResult(content=[{"type": "text", "text": text}], is_error=True)

    @property
    def joined_text(self) -> str:
        return "\n".join(part.get("text", "") for part in self.content)

    def to_wire(self) -> dict[str, Any]:
        return {"content": list(self.content), "isError": self.is_error}

@dataclass
class ToolContext:
    config: BehaviorConfig
    llm: GenerationClient
