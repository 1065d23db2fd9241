"""Load declarative stimulus domains from bundled JSON resources."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

from .errors import DomainConfigError
from .models import Card, StimulusDomain

CONTENT_PACKAGE = "cardsort.content.domains"
DEFAULT_DOMAIN_ID = "classic"


def _card_from_dict(domain_id: str, raw: object) -> Card:
    """Build a reference card from raw JSON content."""
    if not isinstance(raw, dict):
        raise DomainConfigError(f"Domain '{domain_id}' has a reference card that is not an object.")
    try:
        number = raw["number"]
        color = str(raw["color"]).strip()
        shape = str(raw["shape"]).strip()
    except KeyError as exc:
        raise DomainConfigError(f"Domain '{domain_id}' reference card is missing {exc.args[0]!r}.") from exc
    if isinstance(number, bool) or not isinstance(number, int):
        raise DomainConfigError(f"Domain '{domain_id}' reference card number must be an integer, got {number!r}.")
    return Card(color=color, shape=shape, number=number)


def _numbers_from_list(domain_id: str, raw: object) -> tuple[int, ...]:
    """Validate the number palette."""
    if not isinstance(raw, list):
        raise DomainConfigError(f"Domain '{domain_id}' numbers must be a list.")
    numbers: list[int] = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise DomainConfigError(f"Domain '{domain_id}' numbers must be positive integers, got {value!r}.")
        numbers.append(value)
    return tuple(numbers)


def _labels_from_list(domain_id: str, key: str, raw: object) -> tuple[str, ...]:
    """Validate a color or shape palette."""
    if not isinstance(raw, list):
        raise DomainConfigError(f"Domain '{domain_id}' {key} must be a list.")
    labels = tuple(str(value).strip() for value in raw)
    if any(not label for label in labels):
        raise DomainConfigError(f"Domain '{domain_id}' {key} contains an empty value.")
    return labels


def domain_from_dict(raw: dict[str, Any]) -> StimulusDomain:
    """Build a stimulus domain from raw JSON content."""
    domain_id = str(raw.get("id", "")).strip()
    if not domain_id:
        raise DomainConfigError("Stimulus domain id is required.")
    references = raw.get("reference_cards", [])
    if not isinstance(references, list):
        raise DomainConfigError(f"Domain '{domain_id}' reference_cards must be a list.")
    return StimulusDomain(
        id=domain_id,
        title=str(raw.get("title", "")),
        colors=_labels_from_list(domain_id, "colors", raw.get("colors")),
        shapes=_labels_from_list(domain_id, "shapes", raw.get("shapes")),
        numbers=_numbers_from_list(domain_id, raw.get("numbers")),
        reference_cards=tuple(_card_from_dict(domain_id, item) for item in references),
    )


def _parse_domain_text(name: str, text: str) -> StimulusDomain:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DomainConfigError(f"Domain file '{name}' is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise DomainConfigError(f"Domain file '{name}' root must be a JSON object.")
    return domain_from_dict(raw)


def load_domains() -> dict[str, StimulusDomain]:
    """Load bundled stimulus domains."""
    domains: dict[str, StimulusDomain] = {}
    entries = sorted(resources.files(CONTENT_PACKAGE).iterdir(), key=lambda item: item.name)
    for entry in entries:
        if entry.name.endswith(".json"):
            domain = _parse_domain_text(entry.name, entry.read_text(encoding="utf-8-sig"))
            if domain.id in domains:
                raise DomainConfigError(f"Duplicate domain id: {domain.id}")
            domains[domain.id] = domain
    return domains


def load_domains_from_dir(path: Path) -> dict[str, StimulusDomain]:
    """Load domains from directory for tests/tools."""
    domains: dict[str, StimulusDomain] = {}
    for file_path in sorted(path.glob("*.json")):
        domain = _parse_domain_text(file_path.name, file_path.read_text(encoding="utf-8-sig"))
        if domain.id in domains:
            raise DomainConfigError(f"Duplicate domain id: {domain.id}")
        domains[domain.id] = domain
    return domains


def get_domain(domain_id: str = DEFAULT_DOMAIN_ID) -> StimulusDomain:
    """Return one bundled domain by id."""
    domains = load_domains()
    if domain_id not in domains:
        raise DomainConfigError(f"Unknown domain: {domain_id}. Valid domains: {sorted(domains)}")
    return domains[domain_id]
