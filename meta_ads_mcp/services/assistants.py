"""
Capability interfaces for the AI-assisted campaign tools.

No language model is wired in yet. The placeholder implementations return
fixed, clearly labelled output and report ``functional = False`` so callers
can tell the results apart from real model output.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

PLACEHOLDER_NOTICE = (
    "No AI backend is configured; this output is a placeholder and does not "
    "reflect your campaign data."
)


class CampaignPlan(BaseModel):
    name: str
    objective: str
    budget: float
    targeting: Dict[str, Any] = Field(default_factory=dict)
    timeline: str


class AdCopyVariation(BaseModel):
    headline: str
    description: str
    call_to_action: str


class Recommendation(BaseModel):
    action: str
    reason: str
    confidence: str


class PerformanceAnalysis(BaseModel):
    summary: str
    insights: List[str] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)


class CampaignPlanner(Protocol):
    functional: bool

    async def plan(self, prompt: str, budget: Optional[float] = None) -> CampaignPlan: ...


class AdCopyGenerator(Protocol):
    functional: bool

    async def generate(self, goal: str, language: str, count: int) -> List[AdCopyVariation]: ...


class PerformanceAnalyst(Protocol):
    functional: bool

    async def analyze(self, insights: Any) -> PerformanceAnalysis: ...


class PlaceholderCampaignPlanner:
    """Echoes the prompt into a fixed lead-generation plan."""

    functional = False
    default_budget = 30000.0

    async def plan(self, prompt: str, budget: Optional[float] = None) -> CampaignPlan:
        return CampaignPlan(
            name=f"Campaign: {prompt[:50]}",
            objective="OUTCOME_LEADS",
            budget=budget or self.default_budget,
            targeting={
                "geo_locations": {"countries": ["HU"]},
                "age_min": 25,
                "age_max": 55,
            },
            timeline="7 days",
        )


class PlaceholderAdCopyGenerator:
    functional = False

    async def generate(self, goal: str, language: str, count: int) -> List[AdCopyVariation]:
        return [
            AdCopyVariation(
                headline=f"Headline {index + 1} for: {goal}",
                description=f"Compelling description {index + 1}",
                call_to_action="BOOK_NOW" if index % 2 == 0 else "LEARN_MORE",
            )
            for index in range(count)
        ]


class PlaceholderPerformanceAnalyst:
    functional = False

    async def analyze(self, insights: Any) -> PerformanceAnalysis:
        return PerformanceAnalysis(
            summary="Campaign performing well",
            insights=[
                "Cost per lead is below target",
                "Evening ads perform 2x better",
            ],
            recommendations=[
                Recommendation(action="Increase budget", reason="Strong ROI", confidence="high"),
            ],
        )


__all__ = [
    "AdCopyGenerator",
    "AdCopyVariation",
    "CampaignPlan",
    "CampaignPlanner",
    "PLACEHOLDER_NOTICE",
    "PerformanceAnalysis",
    "PerformanceAnalyst",
    "PlaceholderAdCopyGenerator",
    "PlaceholderCampaignPlanner",
    "PlaceholderPerformanceAnalyst",
    "Recommendation",
]
