"""
Deployment Events
Structured progress reports emitted by the pipeline, rendered with loguru
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List
from loguru import logger


class Stage(Enum):
    """Pipeline stages, in execution order."""

    SURVEY = "survey"
    SELECTION = "selection"
    ARTIFACT = "artifact"
    GAS = "gas"
    DEPLOY = "deploy"
    VERIFY = "verify"
    RECORD = "record"
    SUMMARY = "summary"


class Level(Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class DeploymentEvent:
    """One progress report."""

    stage: Stage
    level: Level
    message: str
    data: Dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[DeploymentEvent], None]


def log_event(event: DeploymentEvent):
    """Render an event to the configured loguru sinks"""
    logger.opt(depth=1).log(event.level.value, f"[{event.stage.value}] {event.message}")


class EventCollector:
    """Keeps every event; optionally forwards them to another handler."""

    def __init__(self, forward: EventHandler = None):
        self.events: List[DeploymentEvent] = []
        self.forward = forward

    def __call__(self, event: DeploymentEvent):
        self.events.append(event)
        if self.forward:
            self.forward(event)

    def for_stage(self, stage: Stage) -> List[DeploymentEvent]:
        return [event for event in self.events if event.stage == stage]
