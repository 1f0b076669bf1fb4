from datetime import timedelta
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant", "system", "tool"]


class Message(BaseModel):
    """A single chat message. Sequence order is forwarded to the backend verbatim."""
    role: Role
    content: str


class GenerateOptions(BaseModel):
    """
    Sampling options shared by every backend.

    A zero value means "let the backend decide": adapters only put a field
    on the wire when it is greater than zero.
    """
    temperature: float = 0.0
    max_tokens: int = 0
    top_p: float = 0.0
    stream: bool = False


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ToolDefinition(BaseModel):
    """Tool schema supplied by the tool runtime. Read-only here."""
    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ToolCall(BaseModel):
    """A tool invocation decoded from model text."""
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class Response(BaseModel):
    """
    Normalized result of a chat call, regardless of backend dialect.

    Frozen: use ``model_copy(update=...)`` to derive a modified response.
    """
    model_config = ConfigDict(frozen=True)

    content: str
    tool_calls: List[ToolCall] = Field(default_factory=list)
    finish_reason: str = ""
    usage: Usage = Field(default_factory=Usage)
    duration: timedelta = timedelta(0)


class BackendInfo(BaseModel):
    """Point-in-time view of one registered backend."""
    name: str
    available: bool
    current: bool
