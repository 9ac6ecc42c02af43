from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from utils.logging_setup import init_logging, op_extra


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """State handed from step to step during a catalog import."""

    tenant_id: Optional[str] = None
    list_id: Optional[str] = None
    companies: list = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        init_logging()
        for step in self.steps:
            name = type(step).__name__
            started = time.monotonic()
            ctx = step.run(ctx)
            duration_ms = int((time.monotonic() - started) * 1000)
            ctx.meta.setdefault("step_durations_ms", {})[name] = duration_ms
            logger.debug(
                "Step %s finished with %d companies",
                name,
                len(ctx.companies or []),
                extra=op_extra(name, ctx.tenant_id, duration_ms=duration_ms),
            )
        return ctx
