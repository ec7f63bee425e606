"""Status JSON the host pipes to the status line command on stdin."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class ModelInfo(BaseModel):
    id: Optional[str] = None
    display_name: Optional[str] = None


class Workspace(BaseModel):
    current_dir: Optional[str] = None
    project_dir: Optional[str] = None


class OutputStyle(BaseModel):
    name: Optional[str] = None


class Cost(BaseModel):
    total_cost_usd: Optional[float] = None
    total_duration_ms: Optional[float] = None
    total_api_duration_ms: Optional[float] = None
    total_lines_added: Optional[int] = None
    total_lines_removed: Optional[int] = None


class CurrentUsage(BaseModel):
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None


class ContextWindow(BaseModel):
    total_input_tokens: Optional[int] = None
    total_output_tokens: Optional[int] = None
    context_window_size: Optional[int] = None
    current_usage: Optional[CurrentUsage] = None
    used_percentage: Optional[float] = None
    remaining_percentage: Optional[float] = None


class StatusJSON(BaseModel):
    """Session snapshot sent by the host on every refresh.

    Unknown keys are kept so custom commands receive the full document.
    """
    hook_event_name: Optional[str] = None
    session_id: Optional[str] = None
    transcript_path: Optional[str] = None
    cwd: Optional[str] = None
    model: Optional[Union[str, ModelInfo]] = None
    workspace: Optional[Workspace] = None
    version: Optional[str] = None
    output_style: Optional[OutputStyle] = None
    cost: Optional[Cost] = None
    context_window: Optional[ContextWindow] = None

    model_config = ConfigDict(extra="allow")

    @property
    def model_id(self) -> Optional[str]:
        if isinstance(self.model, ModelInfo):
            return self.model.id
        return self.model

    @property
    def model_display_name(self) -> Optional[str]:
        if isinstance(self.model, ModelInfo):
            return self.model.display_name or self.model.id
        return self.model
