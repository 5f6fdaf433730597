"""
Сводный отчёт по шаблонам конкатенации.

Модели pydantic сериализуются в camelCase через model_dump(by_alias=True).
"""

from __future__ import annotations

from typing import List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .concatenation import ARIA, DYNAMIC, FULL, MINIMAL, ConcatenationPattern

# Размер runtime-системы конкатенации (KB) и оценка на каждый используемый уровень
BASELINE_RUNTIME_KB = 87.76
PER_TIER_RUNTIME_KB = 5.0

RECOMMEND_EXTRACT_VARIABLES = (
    "Consider extracting variables from concatenation patterns to enable static optimization"
)
RECOMMEND_SIMPLIFY_STRUCTURE = (
    "Many concatenations require full accessibility - consider simplifying component structures"
)
RECOMMEND_REVIEW_LOW_RATE = (
    "Low optimization rate - review concatenation patterns for static optimization opportunities"
)


class AccessibilityBreakdown(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    minimal: int = 0
    aria: int = 0
    full: int = 0


class ConcatenationReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_patterns: int = Field(0, alias="totalPatterns")
    optimized_patterns: int = Field(0, alias="optimizedPatterns")
    static_patterns: int = Field(0, alias="staticPatterns")
    dynamic_patterns: int = Field(0, alias="dynamicPatterns")
    bundle_savings_kb: float = Field(BASELINE_RUNTIME_KB, alias="bundleSavingsKB")
    accessibility_breakdown: AccessibilityBreakdown = Field(
        default_factory=AccessibilityBreakdown, alias="accessibilityBreakdown"
    )
    recommendations: List[str] = Field(default_factory=list)


def estimate_bundle_savings(patterns: Sequence[ConcatenationPattern]) -> float:
    """Базовый размер минус оценка на каждый различный уровень доступности."""
    tiers = {p.accessibility_needs for p in patterns}
    return max(0.0, round(BASELINE_RUNTIME_KB - PER_TIER_RUNTIME_KB * len(tiers), 2))


def build_report(patterns: Sequence[ConcatenationPattern]) -> ConcatenationReport:
    """
    Строит агрегированный отчёт по списку шаблонов.

    Рекомендации формируются набором правил в фиксированном порядке.
    """
    total = len(patterns)
    static = sum(1 for p in patterns if p.is_static)
    dynamic = sum(1 for p in patterns if p.type == DYNAMIC)
    optimized = sum(1 for p in patterns if p.optimizable)

    breakdown = AccessibilityBreakdown(
        minimal=sum(1 for p in patterns if p.accessibility_needs == MINIMAL),
        aria=sum(1 for p in patterns if p.accessibility_needs == ARIA),
        full=sum(1 for p in patterns if p.accessibility_needs == FULL),
    )
    savings = estimate_bundle_savings(patterns)

    recommendations: List[str] = []
    if dynamic > static:
        recommendations.append(RECOMMEND_EXTRACT_VARIABLES)
    if breakdown.full > breakdown.minimal + breakdown.aria:
        recommendations.append(RECOMMEND_SIMPLIFY_STRUCTURE)
    if total > 10 and optimized / total < 0.5:
        recommendations.append(RECOMMEND_REVIEW_LOW_RATE)
    if savings > 50:
        recommendations.append(
            f"High bundle savings potential: {savings:.1f}KB - implement concatenation optimization"
        )

    return ConcatenationReport(
        total_patterns=total,
        optimized_patterns=optimized,
        static_patterns=static,
        dynamic_patterns=dynamic,
        bundle_savings_kb=savings,
        accessibility_breakdown=breakdown,
        recommendations=recommendations,
    )


__all__ = [
    "AccessibilityBreakdown",
    "ConcatenationReport",
    "build_report",
    "estimate_bundle_savings",
    "BASELINE_RUNTIME_KB",
    "PER_TIER_RUNTIME_KB",
]
