#!filepath: drugsens/observability/timeline_reporter.py
from collections import OrderedDict
from typing import Dict

from drugsens.utils.logger import logs


def stage_of(leaf: str) -> str:
    # "encode/onehot_only" → "encode"
    return str(leaf).split("/", 1)[0]


def stage_totals(timeline: Dict[str, float]) -> Dict[str, float]:
    """Sum leaf timers per pipeline stage, in first-seen order."""
    totals: Dict[str, float] = OrderedDict()
    for leaf, sec in timeline.items():
        stage = stage_of(leaf)
        totals[stage] = totals.get(stage, 0.0) + sec
    return totals


class TimelineReporter:
    """
    Pipeline Timeline 报告：
    - stage 小计（preprocess / split / encode / train / report）
    - 每个 stage 下的叶子 timer（per strategy）
    """

    def __init__(self, timeline: Dict[str, float], run_id: str):
        self.timeline = timeline
        self.run_id = run_id

    def print(self):
        totals = stage_totals(self.timeline)
        logs.info(f"[Timeline] ===== run {self.run_id}: {len(totals)} stages =====")

        for stage, stage_sec in totals.items():
            logs.info(f"[Timeline] {stage:<30} {stage_sec:>8.3f}s")
            for leaf, sec in self.timeline.items():
                if leaf != stage and stage_of(leaf) == stage:
                    logs.info(f"[Timeline]   {leaf:<28} {sec:>8.3f}s")

        logs.info(f"[Timeline] Total{'':<27} {sum(totals.values()):>8.3f}s")
