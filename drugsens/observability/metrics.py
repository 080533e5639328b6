#!filepath: drugsens/observability/metrics.py
from dataclasses import dataclass, field
from typing import Any, Dict

from drugsens.utils.logger import logs


@dataclass
class MetricRecorder:
    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.debug(f"[Metric] {name} = {value}")

    def increment(self, name: str, value: int = 1):
        """Counter semantics: fallback rows accumulate per strategy / tier / column."""
        if not self.enabled:
            return
        self.metrics[name] = self.metrics.get(name, 0) + value
        logs.debug(f"[Metric] {name} += {value}")
