"""
User text validation.
Blocks over-long text and screens it for self-harm, crisis, violence and
substance abuse language before anything is written.
"""
import re
from typing import Optional

from horizon.constants import MAX_TEXT_LENGTH
from horizon.exceptions import UnsafeContentException, ValidationException
from horizon.schemas import CrisisResource, SafetyResult

CRISIS_RESOURCES = [
    CrisisResource(
        name="988 Suicide & Crisis Lifeline",
        phone="988",
        url="https://988lifeline.org",
        description="24/7 crisis support for suicide prevention and mental health emergencies",
    ),
    CrisisResource(
        name="Crisis Text Line",
        phone="Text HOME to 741741",
        url="https://www.crisistextline.org",
        description="Free, 24/7 text support for people in crisis",
    ),
    CrisisResource(
        name="SAMHSA National Helpline",
        phone="1-800-662-4357",
        url="https://www.samhsa.gov/find-help/national-helpline",
        description="Substance abuse and mental health treatment referral service",
    ),
]

SELF_HARM_PATTERNS = [
    re.compile(r"\b(kill|harm|hurt|injure)\s+(yourself|myself|themselves|oneself)\b", re.IGNORECASE),
    re.compile(r"\b(how to|ways to|methods to)\s+(die|kill yourself|end it|end life)\b", re.IGNORECASE),
    re.compile(r"\b(suicide|self-harm|self-injury|cutting|burning)\b", re.IGNORECASE),
    re.compile(r"\b(overdose|poison|hang|jump|bridge)\s+(yourself|myself)\b", re.IGNORECASE),
]

CRISIS_PATTERNS = [
    re.compile(r"\b(can't go on|want to die|end it all|no point|hopeless)\b", re.IGNORECASE),
    re.compile(r"\b(thinking about|considering|planning)\s+(suicide|ending it|death)\b", re.IGNORECASE),
]

VIOLENCE_PATTERNS = [
    re.compile(r"\b(kill|murder|harm|hurt|attack|violence)\s+(someone|others|people|them)\b", re.IGNORECASE),
    re.compile(r"\b(how to|ways to)\s+(kill|murder|harm|attack)\s+(someone|others)\b", re.IGNORECASE),
    re.compile(r"\b(bomb|weapon|gun|knife|poison)\s+(threat|plan|attack)\b", re.IGNORECASE),
]

SUBSTANCE_ABUSE_PATTERNS = [
    re.compile(r"\b(how to|ways to)\s+(overdose|get high|use drugs|abuse)\b", re.IGNORECASE),
    re.compile(r"\b(drug|alcohol|substance)\s+(abuse|addiction|overdose)\b", re.IGNORECASE),
]

# (patterns, severity, action, message), checked in order
SAFETY_RULES = [
    (
        SELF_HARM_PATTERNS, "critical", "escalate",
        "Your message contains potentially harmful content. If you're in crisis, "
        "please reach out for help immediately.",
    ),
    (
        CRISIS_PATTERNS, "critical", "escalate",
        "We're concerned about your wellbeing. Please reach out to a crisis support "
        "service for immediate help.",
    ),
    (
        VIOLENCE_PATTERNS, "high", "block",
        "Your message contains content that suggests harm to others. "
        "This type of content is not allowed.",
    ),
    (
        SUBSTANCE_ABUSE_PATTERNS, "high", "redirect",
        "Your message contains content related to substance abuse. "
        "If you need help, please contact a support service.",
    ),
]


def validate_user_text(text: Optional[str], max_length: int = MAX_TEXT_LENGTH) -> SafetyResult:
    """
    Screen user supplied text.

    Empty text is always valid. Text longer than max_length is blocked with
    low severity; otherwise the first matching safety rule decides.
    """
    if not text:
        return SafetyResult(valid=True)

    if len(text) > max_length:
        return SafetyResult(
            valid=False,
            severity="low",
            action="block",
            error=f"Text must be less than {max_length} characters",
        )

    for patterns, severity, action, message in SAFETY_RULES:
        if any(pattern.search(text) for pattern in patterns):
            return SafetyResult(
                valid=False,
                severity=severity,
                action=action,
                error=message,
                resources=CRISIS_RESOURCES,
            )

    return SafetyResult(valid=True, severity="low", action="allow")


def truncate_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length]


def ensure_safe_text(field: str, text: Optional[str], max_length: int = MAX_TEXT_LENGTH) -> Optional[str]:
    """
    Validate text and return it stripped, raising when it must not be stored.

    Raises:
        ValidationException: text is too long
        UnsafeContentException: text matched a safety pattern
    """
    if text is None:
        return None
    text = text.strip()
    result = validate_user_text(text, max_length)
    if result.valid:
        return text
    if not result.resources:
        raise ValidationException(field, result.error)
    raise UnsafeContentException(
        field,
        result.error,
        severity=result.severity,
        action=result.action,
        resources=[resource.model_dump() for resource in result.resources],
    )
