"""MCP tools for the health self-assessment.

These tools accept the assessment form's answers, keep the current
profile in the data bank, and expose the evaluator's three queries (BMI,
BMI category, risk findings) plus the combined analysis view. Without a
saved assessment every query answers with its neutral value.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from carewise.domains.health.connectors.profile_store import ProfileStoreError
from carewise.domains.health.domain_logic.analysis import build_health_analysis
from carewise.domains.health.domain_logic.intake import (
    CONDITION_OPTIONS,
    DEFAULT_HEALTH_PROFILE,
    DIET_TYPES,
    FAMILY_HISTORY_OPTIONS,
    ProfileValidationError,
    finding_to_dict,
    parse_health_profile,
    profile_to_dict,
)
from carewise.domains.health.domain_logic.metrics import calculate_bmi, get_bmi_category
from carewise.domains.health.domain_logic.profile_models import BMI_UNKNOWN, HealthProfile
from carewise.domains.health.domain_logic.risk_evaluator import get_health_risks

if TYPE_CHECKING:
    from carewise.core.audit.logger import ActivityLogger
    from carewise.domains.health.connectors import HealthProfileSource

logger = logging.getLogger(__name__)

_NO_PROFILE_NOTE = "No health assessment saved yet. Complete the assessment to get an analysis."


def register_assessment_tools(
    mcp: FastMCP,
    store: HealthProfileSource,
    activity_logger: ActivityLogger | None = None,
) -> None:
    """Register assessment and analysis tools on the MCP server."""

    def _record(
        tool_name: str,
        start_time: float,
        *,
        tool_input: Any = None,
        action: str = "tool_invocation",
        status: str = "success",
        error_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if activity_logger is None:
            return
        activity_logger.log_tool_call(
            tool_name,
            tool_input,
            action=action,
            duration_ms=(time.monotonic() - start_time) * 1000,
            status=status,
            error_type=error_type,
            metadata=metadata,
        )

    def _load(tool_name: str, start_time: float) -> tuple[HealthProfile | None, str | None]:
        """Return (profile, None), or (None, error JSON) if the stored record is unreadable."""
        try:
            return store.load(), None
        except ProfileStoreError as exc:
            logger.error("Stored health profile unreadable: %s", exc)
            _record(tool_name, start_time, status="failure", error_type=type(exc).__name__)
            return None, json.dumps({
                "status": "error",
                "message": "The saved assessment could not be read. Save a new assessment.",
            })

    @mcp.tool
    async def save_health_assessment(ctx: Context, assessment: dict[str, Any]) -> str:
        """Save your health assessment answers, replacing any previous assessment.

        Fields left out keep their previously saved values (or the form
        defaults on a first assessment).

        Args:
            assessment: Answers in the assessment form's shape: age, height (cm),
                weight (kg), gender, preExistingConditions, eatingHabits
                {dietType, mealsPerDay, snacksPerDay, waterConsumption,
                alcoholConsumption, caffeineConsumption}, physicalActivity,
                sleepHours, smokingStatus, familyHistory.
        """
        start_time = time.monotonic()
        try:
            current = store.load()
        except ProfileStoreError:
            logger.warning("Saved assessment unreadable; starting from form defaults")
            current = None

        try:
            profile = parse_health_profile(
                assessment, defaults=current or DEFAULT_HEALTH_PROFILE,
            )
        except ProfileValidationError as exc:
            logger.info("Rejected health assessment: %d validation errors", len(exc.errors))
            _record(
                "save_health_assessment", start_time,
                tool_input=assessment, status="failure", error_type=type(exc).__name__,
            )
            return json.dumps({"status": "error", "errors": exc.errors})

        try:
            store.save(profile)
        except ProfileStoreError as exc:
            logger.error("Could not save health assessment: %s", exc)
            _record(
                "save_health_assessment", start_time,
                tool_input=assessment, status="failure", error_type=type(exc).__name__,
            )
            return json.dumps({
                "status": "error",
                "message": "The assessment could not be saved. Please try again.",
            })

        risks = get_health_risks(profile)
        category = get_bmi_category(profile)
        _record(
            "save_health_assessment", start_time,
            tool_input=assessment, action="profile_saved",
            metadata={"risk_count": len(risks), "bmi_category": category},
        )
        return json.dumps({
            "status": "saved",
            "assessment": profile_to_dict(profile),
            "bmi": calculate_bmi(profile),
            "bmi_category": category,
            "risk_count": len(risks),
        })

    @mcp.tool
    async def get_health_assessment(ctx: Context) -> str:
        """Show the currently saved health assessment."""
        start_time = time.monotonic()
        profile, error = _load("get_health_assessment", start_time)
        if error:
            return error
        _record("get_health_assessment", start_time, metadata={"has_profile": profile is not None})
        if profile is None:
            return json.dumps({"status": "ok", "has_profile": False, "note": _NO_PROFILE_NOTE})
        return json.dumps({
            "status": "ok",
            "has_profile": True,
            "assessment": profile_to_dict(profile),
        })

    @mcp.tool
    async def clear_health_assessment(ctx: Context) -> str:
        """Delete the saved health assessment. This cannot be undone."""
        start_time = time.monotonic()
        try:
            removed = store.clear()
        except ProfileStoreError as exc:
            logger.error("Could not clear health assessment: %s", exc)
            _record(
                "clear_health_assessment", start_time,
                status="failure", error_type=type(exc).__name__,
            )
            return json.dumps({
                "status": "error",
                "message": "The saved assessment could not be deleted. Please try again.",
            })
        _record(
            "clear_health_assessment", start_time,
            action="profile_cleared", metadata={"removed": removed},
        )
        return json.dumps({"status": "cleared" if removed else "not_found"})

    @mcp.tool
    async def default_assessment(ctx: Context) -> str:
        """Show the assessment form's starting values and answer options."""
        return json.dumps({
            "status": "ok",
            "defaults": profile_to_dict(DEFAULT_HEALTH_PROFILE),
            "options": {
                "dietType": list(DIET_TYPES),
                "preExistingConditions": list(CONDITION_OPTIONS),
                "familyHistory": list(FAMILY_HISTORY_OPTIONS),
            },
        })

    @mcp.tool(name="calculate_bmi")
    async def calculate_bmi_tool(ctx: Context) -> str:
        """Calculate Body Mass Index from the saved assessment."""
        start_time = time.monotonic()
        profile, error = _load("calculate_bmi", start_time)
        if error:
            return error
        _record("calculate_bmi", start_time, metadata={"has_profile": profile is not None})
        return json.dumps({
            "status": "ok",
            "has_profile": profile is not None,
            "bmi": calculate_bmi(profile),
        })

    @mcp.tool(name="get_bmi_category")
    async def get_bmi_category_tool(ctx: Context) -> str:
        """Classify the saved assessment's BMI as Underweight, Normal, Overweight or Obese."""
        start_time = time.monotonic()
        profile, error = _load("get_bmi_category", start_time)
        if error:
            return error
        category = get_bmi_category(profile)
        _record("get_bmi_category", start_time, metadata={"bmi_category": category})
        return json.dumps({
            "status": "ok",
            "has_profile": profile is not None,
            "bmi_category": category,
        })

    @mcp.tool(name="get_health_risks")
    async def get_health_risks_tool(ctx: Context) -> str:
        """List potential health risks and preventive measures for the saved assessment."""
        start_time = time.monotonic()
        profile, error = _load("get_health_risks", start_time)
        if error:
            return error
        risks = get_health_risks(profile)
        _record("get_health_risks", start_time, metadata={"risk_count": len(risks)})
        return json.dumps({
            "status": "ok",
            "has_profile": profile is not None,
            "risks": [finding_to_dict(r) for r in risks],
        })

    @mcp.tool
    async def health_analysis(ctx: Context) -> str:
        """Full analysis of the saved assessment: BMI, lifestyle impact and health risks."""
        start_time = time.monotonic()
        profile, error = _load("health_analysis", start_time)
        if error:
            return error
        analysis = build_health_analysis(profile)
        if analysis is None:
            _record("health_analysis", start_time, metadata={"has_profile": False})
            return json.dumps({
                "status": "ok",
                "has_profile": False,
                "bmi": None,
                "bmi_category": BMI_UNKNOWN,
                "risks": [],
                "risks_by_severity": [],
                "note": _NO_PROFILE_NOTE,
            })
        _record(
            "health_analysis", start_time,
            metadata={"risk_count": len(analysis.risks), "bmi_category": analysis.bmi_category},
        )
        return json.dumps({"status": "ok", "has_profile": True, **analysis.to_dict()}, indent=2)
