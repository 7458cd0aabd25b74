"""Evidence validation domain service.

Turns a raw evidence payload (as received over the wire) into the typed
evidence variant for a case's verification method. Validation is
structural only: nothing here decides whether the proof is convincing,
that is the finder's call.

Payload shapes:
- PHOTO_MATCH: photos (non-empty list of references), note?
- MICROCHIP: chip (letters/digits, spaces and dashes ignored), registry?
- DOCUMENTATION: documents (non-empty list of references), document_type?, note?
- PHYSICAL_MEETING: place, time (ISO-8601, naive taken as UTC), note?
- OTHER: description, attachments?

Unknown keys are rejected. Every problem found is reported together in a
single MalformedEvidenceError so the claimant can fix them in one pass.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from reunite.domain.errors.evidence import MalformedEvidenceError
from reunite.domain.models.evidence import (
    DocumentationEvidence,
    Evidence,
    MicrochipEvidence,
    OtherEvidence,
    PhotoMatchEvidence,
    PhysicalMeetingEvidence,
    VerificationMethod,
)

MAX_CHIP_LENGTH: int = 32
MAX_REFERENCES: int = 20
MAX_TEXT_LENGTH: int = 2000

ALLOWED_KEYS: dict[VerificationMethod, frozenset[str]] = {
    VerificationMethod.PHOTO_MATCH: frozenset({"photos", "note"}),
    VerificationMethod.MICROCHIP: frozenset({"chip", "registry"}),
    VerificationMethod.DOCUMENTATION: frozenset({"documents", "document_type", "note"}),
    VerificationMethod.PHYSICAL_MEETING: frozenset({"place", "time", "note"}),
    VerificationMethod.OTHER: frozenset({"description", "attachments"}),
}


def _required_text(payload: Mapping[str, Any], key: str, problems: list[str]) -> str:
    value = payload.get(key)
    if value is None:
        problems.append(f"'{key}' is required")
        return ""
    if not isinstance(value, str):
        problems.append(f"'{key}' must be a string")
        return ""
    text = value.strip()
    if not text:
        problems.append(f"'{key}' must not be empty")
    elif len(text) > MAX_TEXT_LENGTH:
        problems.append(f"'{key}' exceeds {MAX_TEXT_LENGTH} characters")
    return text


def _optional_text(
    payload: Mapping[str, Any], key: str, problems: list[str]
) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        problems.append(f"'{key}' must be a string")
        return None
    text = value.strip()
    if len(text) > MAX_TEXT_LENGTH:
        problems.append(f"'{key}' exceeds {MAX_TEXT_LENGTH} characters")
    return text or None


def _references(
    payload: Mapping[str, Any],
    key: str,
    problems: list[str],
    required: bool,
) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        if required:
            problems.append(f"'{key}' is required")
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        problems.append(f"'{key}' must be a list of references")
        return ()
    if required and not value:
        problems.append(f"'{key}' must contain at least one reference")
        return ()
    if len(value) > MAX_REFERENCES:
        problems.append(f"'{key}' accepts at most {MAX_REFERENCES} references")
    refs: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            problems.append(f"'{key}[{index}]' must be a non-empty string")
            continue
        refs.append(item.strip())
    return tuple(refs)


def normalize_chip(raw: str) -> str:
    """Strip spaces and dashes from a chip number and upper-case it."""
    return raw.replace(" ", "").replace("-", "").upper()


def _parse_photo_match(payload: Mapping[str, Any], problems: list[str]) -> Evidence:
    photos = _references(payload, "photos", problems, required=True)
    note = _optional_text(payload, "note", problems)
    return PhotoMatchEvidence(photos=photos, note=note)


def _parse_microchip(payload: Mapping[str, Any], problems: list[str]) -> Evidence:
    raw = payload.get("chip")
    chip = ""
    if raw is None:
        problems.append("'chip' is required")
    elif not isinstance(raw, str):
        problems.append("'chip' must be a string")
    else:
        chip = normalize_chip(raw)
        if not chip:
            problems.append("'chip' must not be empty")
        elif not chip.isascii() or not chip.isalnum():
            problems.append("'chip' may only contain letters and digits")
        elif len(chip) > MAX_CHIP_LENGTH:
            problems.append(f"'chip' exceeds {MAX_CHIP_LENGTH} characters")
    registry = _optional_text(payload, "registry", problems)
    return MicrochipEvidence(chip=chip, registry=registry)


def _parse_documentation(payload: Mapping[str, Any], problems: list[str]) -> Evidence:
    documents = _references(payload, "documents", problems, required=True)
    document_type = _optional_text(payload, "document_type", problems)
    note = _optional_text(payload, "note", problems)
    return DocumentationEvidence(
        documents=documents, document_type=document_type, note=note
    )


def _parse_meeting_time(value: Any, problems: list[str]) -> datetime | None:
    if value is None:
        problems.append("'time' is required")
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            problems.append("'time' must be an ISO-8601 timestamp")
            return None
    else:
        problems.append("'time' must be an ISO-8601 timestamp")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_physical_meeting(
    payload: Mapping[str, Any], problems: list[str]
) -> Evidence:
    place = _required_text(payload, "place", problems)
    time = _parse_meeting_time(payload.get("time"), problems)
    note = _optional_text(payload, "note", problems)
    if time is None:
        # Placeholder only; the caller raises before returning it.
        time = datetime.min.replace(tzinfo=timezone.utc)
    return PhysicalMeetingEvidence(place=place, time=time, note=note)


def _parse_other(payload: Mapping[str, Any], problems: list[str]) -> Evidence:
    description = _required_text(payload, "description", problems)
    attachments = _references(payload, "attachments", problems, required=False)
    return OtherEvidence(description=description, attachments=attachments)


_PARSERS: dict[
    VerificationMethod, Callable[[Mapping[str, Any], list[str]], Evidence]
] = {
    VerificationMethod.PHOTO_MATCH: _parse_photo_match,
    VerificationMethod.MICROCHIP: _parse_microchip,
    VerificationMethod.DOCUMENTATION: _parse_documentation,
    VerificationMethod.PHYSICAL_MEETING: _parse_physical_meeting,
    VerificationMethod.OTHER: _parse_other,
}


def parse_evidence(
    method: VerificationMethod, payload: Any, case_id: UUID | None = None
) -> Evidence:
    """Validate a raw payload against a verification method.

    Args:
        method: The case's verification method.
        payload: Decoded JSON object supplied by the claimant.
        case_id: The case the payload targets, reported on failure.

    Returns:
        The typed evidence variant for the method.

    Raises:
        MalformedEvidenceError: If the payload does not match the method's
            shape. Carries every problem found.
    """
    if not isinstance(payload, Mapping):
        raise MalformedEvidenceError(
            method, ["evidence must be a JSON object"], case_id=case_id
        )

    problems: list[str] = []
    unknown = sorted(str(key) for key in payload if key not in ALLOWED_KEYS[method])
    for key in unknown:
        problems.append(f"unknown field '{key}' for {method.value}")

    evidence = _PARSERS[method](payload, problems)
    if problems:
        raise MalformedEvidenceError(method, problems, case_id=case_id)
    return evidence
