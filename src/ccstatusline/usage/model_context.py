"""Token metrics and context window sizing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .status import ContextWindow

DEFAULT_CONTEXT_TOKENS = 200_000
LONG_CONTEXT_TOKENS = 1_000_000
# Auto-compaction kicks in at 80% of the window.
USABLE_CONTEXT_RATIO = 0.8


@dataclass(frozen=True)
class TokenMetrics:
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    total_tokens: int = 0
    context_length: int = 0
    context_window_size: Optional[int] = None
    used_percentage: Optional[float] = None
    remaining_percentage: Optional[float] = None


def context_window_size(model_id: Optional[str]) -> int:
    """Maximum context tokens for a model id."""
    if not model_id:
        return DEFAULT_CONTEXT_TOKENS
    if "[1m]" in model_id.lower():
        return LONG_CONTEXT_TOKENS
    return DEFAULT_CONTEXT_TOKENS


def context_percentage(metrics: Optional[TokenMetrics], model_id: Optional[str] = None) -> float:
    """Share of the context window in use, 0..100."""
    if metrics is None:
        return 0.0
    if metrics.used_percentage is not None:
        return max(0.0, min(100.0, metrics.used_percentage))
    size = metrics.context_window_size or context_window_size(model_id)
    if size <= 0:
        return 0.0
    return min(100.0, metrics.context_length / size * 100)


def usable_context_percentage(metrics: Optional[TokenMetrics], model_id: Optional[str] = None) -> float:
    """Share of the window usable before auto-compaction, 0..100."""
    if metrics is None:
        return 0.0
    size = metrics.context_window_size or context_window_size(model_id)
    usable = size * USABLE_CONTEXT_RATIO
    if usable <= 0:
        return 0.0
    return min(100.0, metrics.context_length / usable * 100)


def metrics_from_context_window(
    window: Optional[ContextWindow],
    model_id: Optional[str],
) -> Optional[TokenMetrics]:
    """Build token metrics from the ``context_window`` block of the status JSON."""
    if window is None:
        return None

    usage = window.current_usage
    input_tokens = window.total_input_tokens or 0
    output_tokens = window.total_output_tokens or 0
    cache_creation = (usage.cache_creation_input_tokens or 0) if usage else 0
    cache_read = (usage.cache_read_input_tokens or 0) if usage else 0
    cached = cache_creation + cache_read
    context_length = ((usage.input_tokens or 0) if usage else 0) + cached
    size = window.context_window_size or context_window_size(model_id)

    used = window.used_percentage
    if used is None:
        used = min(100.0, context_length / size * 100) if size > 0 else 0.0
    remaining = window.remaining_percentage
    if remaining is None:
        remaining = max(0.0, 100.0 - used)

    return TokenMetrics(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cached_tokens=cached,
        total_tokens=input_tokens + output_tokens + cached,
        context_length=context_length,
        context_window_size=size,
        used_percentage=used,
        remaining_percentage=remaining,
    )
