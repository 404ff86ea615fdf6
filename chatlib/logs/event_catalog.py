"""Human-readable templates for ``logger.log_event`` calls.

Templates live in ``event_templates.json`` next to this module, shaped as
``{domain: {action: template}}``. :func:`audit_events` scans the package
source for ``log_event("domain", "action", ...)`` calls and reports events
logged without a template and templates nothing logs.

Run ``python -m chatlib.logs.event_catalog`` to print the audit.
"""

from __future__ import annotations

import ast
import json
import string
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

EventKey = tuple[str, str]

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")
PACKAGE_ROOT = Path(__file__).resolve().parent.parent

EVENT_TEMPLATES: dict[EventKey, str] = {}


def load_event_templates(path: Path = TEMPLATES_PATH) -> dict[EventKey, str]:
    """Read the catalog.

    A missing or malformed file yields a single ``app/load_error`` entry so
    logging keeps working with derived messages.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): f"Event templates file missing: {path.name}"}
    except (OSError, json.JSONDecodeError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    if not isinstance(raw, Mapping):
        return {("app", "load_error"): "Event templates must be a JSON object"}
    return {
        (domain.lower(), action.lower()): template
        for domain, actions in raw.items()
        if isinstance(actions, Mapping)
        for action, template in actions.items()
        if isinstance(template, str)
    }


def reload_event_templates(path: Path = TEMPLATES_PATH) -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = load_event_templates(path)


def template_fields(template: str) -> set[str]:
    """Placeholder names used by ``template`` (``{error}`` -> ``error``)."""
    return {
        name.split(".", 1)[0].split("[", 1)[0]
        for _, name, _, _ in string.Formatter().parse(template)
        if name
    }


def _event_key(call: ast.Call) -> EventKey | None:
    if not (
        isinstance(call.func, ast.Attribute)
        and call.func.attr == "log_event"
        and len(call.args) >= 2
    ):
        return None
    domain, action = call.args[0], call.args[1]
    if not (
        isinstance(domain, ast.Constant)
        and isinstance(domain.value, str)
        and isinstance(action, ast.Constant)
        and isinstance(action.value, str)
    ):
        return None
    return domain.value, action.value


def logged_events(root: Path = PACKAGE_ROOT) -> set[EventKey]:
    """``(domain, action)`` literals passed to ``*.log_event`` under ``root``."""
    events: set[EventKey] = set()
    for path in sorted(root.rglob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if isinstance(node, ast.Call) and (key := _event_key(node)):
                events.add(key)
    return events


@dataclass(frozen=True)
class CatalogAudit:
    missing: tuple[EventKey, ...]  # logged, no template
    unused: tuple[EventKey, ...]  # template, never logged

    @property
    def ok(self) -> bool:
        return not self.missing


def audit_events(
    root: Path = PACKAGE_ROOT, templates: Mapping[EventKey, str] | None = None
) -> CatalogAudit:
    catalog = EVENT_TEMPLATES if templates is None else templates
    logged = logged_events(root)
    return CatalogAudit(
        missing=tuple(sorted(logged - set(catalog))),
        unused=tuple(sorted(set(catalog) - logged)),
    )


def main() -> int:
    audit = audit_events()
    for domain, action in audit.missing:
        print(f"missing template: {domain}/{action}")
    for domain, action in audit.unused:
        print(f"unused template:  {domain}/{action}")
    return 0 if audit.ok else 1


reload_event_templates()

__all__ = [
    "EVENT_TEMPLATES",
    "CatalogAudit",
    "audit_events",
    "load_event_templates",
    "logged_events",
    "reload_event_templates",
    "template_fields",
]

if __name__ == "__main__":
    sys.exit(main())
