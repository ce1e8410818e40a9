"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict


class GenerateIn(BaseModel):
    """Inbound body. Fields stay loose so type problems become guardrail decisions, not 422s."""
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model: Any = None
    system: Any = None
    prompt: Any = None


class GenerateOut(BaseModel):
    text: str


class ErrorOut(BaseModel):
    error: str
    details: Any = None


@dataclass
class OutboundGenerationRequest:
    """Request forwarded to the Responses endpoint."""
    model: str
    system_text: str
    user_text: str
    max_output_tokens: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "input": [
                {
                    "role": "system",
                    "content": [{"type": "input_text", "text": self.system_text}],
                },
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": self.user_text}],
                },
            ],
            "max_output_tokens": self.max_output_tokens,
        }


@dataclass
class UpstreamResponse:
    """Upstream reply reduced to the fields text extraction cares about.

    ``output`` holds, per output item, the ``text`` of each content fragment
    that carried one. ``None`` means the field was absent or not a list.
    """
    status: int
    raw: Any
    output_text: str | None = None
    output: list[list[str]] | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def from_json(cls, status: int, data: Any) -> "UpstreamResponse":
        if not isinstance(data, dict):
            return cls(status=status, raw=data)

        output_text = data.get("output_text")
        if not isinstance(output_text, str):
            output_text = None

        output = None
        items = data.get("output")
        if isinstance(items, list):
            output = []
            for item in items:
                content = item.get("content") if isinstance(item, dict) else None
                texts: list[str] = []
                if isinstance(content, list):
                    for frag in content:
                        if isinstance(frag, dict) and isinstance(frag.get("text"), str):
                            texts.append(frag["text"])
                output.append(texts)

        return cls(status=status, raw=data, output_text=output_text, output=output)


@dataclass
class ProxyResponse:
    """Status, JSON body and extra headers returned to the caller."""
    status: int
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
