# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""PMD engine: XML report normalisation and stderr simplification."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import ClassVar, Final

from ..constants import JAR_EXTENSION, XML_EXTENSION, CustomConfig, EngineName
from ..events import Channel
from ..models import RuleResult, Violation
from ..serialization import coerce_optional_int
from .base import AbstractRuleEngine
from .stderr import ErrorTemplate

LOGGER = logging.getLogger(__name__)

_XML_START: Final[str] = "<?xml"
_XML_END: Final[str] = "</pmd>"
_ROOT_TAG: Final[str] = "pmd"
_DEFAULT_PRIORITY: Final[int] = 3

RULESET_NOT_FOUND_TEMPLATE: Final[str] = (
    "PMD could not find resource '{resource}' while loading rule '{rule}'. "
    "Check the category or ruleset reference in your PMD config file."
)
JAVA_VERSION_TEMPLATE: Final[str] = (
    "PMD requires a newer Java runtime than the one installed (class file version {version}). "
    "Upgrade Java or point JAVA_HOME at a newer installation."
)
HEAP_EXHAUSTED_TEMPLATE: Final[str] = (
    "PMD ran out of memory. Scan fewer files at once or increase the JVM heap size."
)

PMD_ERROR_TEMPLATES: Final[tuple[ErrorTemplate, ...]] = (
    ErrorTemplate(
        name="ruleset-not-found",
        pattern=re.compile(
            r"RuleSetNotFoundException: Can't find resource '(?P<resource>[^']+)' for rule '(?P<rule>[^']+)'",
        ),
        message=RULESET_NOT_FOUND_TEMPLATE,
    ),
    ErrorTemplate(
        name="unsupported-java-version",
        pattern=re.compile(r"UnsupportedClassVersionError:.*?class file version (?P<version>[\d.]+)"),
        message=JAVA_VERSION_TEMPLATE,
    ),
    ErrorTemplate(
        name="heap-exhausted",
        pattern=re.compile(r"java\.lang\.OutOfMemoryError: Java heap space"),
        message=HEAP_EXHAUSTED_TEMPLATE,
    ),
)


def _local_name(tag: str) -> str:
    """Return ``tag`` without its ``{namespace}`` prefix."""

    return tag.rsplit("}", 1)[-1]


def extract_report(raw: str) -> ET.Element | None:
    """Return the ``<pmd>`` root parsed from ``raw``, or ``None`` if there is none.

    PMD may print log lines around its report, so the XML is sliced from the
    first declaration to the last closing ``</pmd>`` tag. Missing markers and
    malformed XML both yield ``None``.
    """

    start = raw.find(_XML_START)
    end = raw.rfind(_XML_END)
    if start == -1 or end == -1 or end < start:
        return None
    try:
        root = ET.fromstring(raw[start : end + len(_XML_END)])
    except (ET.ParseError, ValueError) as exc:
        LOGGER.debug("discarding unparsable PMD report: %s", exc)
        return None
    if _local_name(root.tag) != _ROOT_TAG:
        return None
    return root


def _violation_from_node(node: ET.Element) -> Violation:
    attrs = node.attrib
    priority = coerce_optional_int(attrs.get("priority"))
    return Violation(
        rule_name=attrs.get("rule", ""),
        category=attrs.get("ruleset", ""),
        url=attrs.get("externalInfoUrl"),
        severity=priority if priority is not None else _DEFAULT_PRIORITY,
        line=coerce_optional_int(attrs.get("beginline")),
        column=coerce_optional_int(attrs.get("begincolumn")),
        end_line=coerce_optional_int(attrs.get("endline")),
        end_column=coerce_optional_int(attrs.get("endcolumn")),
        message=(node.text or "").strip(),
    )


def _describe_error(attrs: Mapping[str, str]) -> str:
    return f"PMD failed to evaluate against file '{attrs.get('filename', '')}'. Message: {attrs.get('msg', '')}"


def _describe_config_error(attrs: Mapping[str, str]) -> str:
    return f"PMD failed to evaluate rule '{attrs.get('rule', '')}'. Message: {attrs.get('msg', '')}"


def _describe_suppression(attrs: Mapping[str, str]) -> str:
    return (
        f"PMD suppressed violation against file '{attrs.get('filename', '')}'. "
        f"Message: {attrs.get('msg', '')}. "
        f"Suppression Type: {attrs.get('suppressiontype', '')}. "
        f"User Message: {attrs.get('usermsg', '')}"
    )


_NOTIFICATION_BUILDERS: Final = {
    "error": _describe_error,
    "configerror": _describe_config_error,
    "suppressedviolation": _describe_suppression,
}


class PmdEngine(AbstractRuleEngine):
    """Normalise PMD's XML report into :class:`RuleResult` groups.

    ``<file>`` nodes become result groups. ``<error>``, ``<configerror>`` and
    ``<suppressedviolation>`` nodes become ``warning-always`` notifications
    instead of violations. Any other node is ignored.
    """

    name: ClassVar[str] = EngineName.PMD.value
    custom_config_key: ClassVar[CustomConfig | None] = CustomConfig.PMD_CONFIG
    rule_file_extensions: ClassVar[tuple[str, ...]] = (JAR_EXTENSION, XML_EXTENSION)
    stderr_templates: ClassVar[tuple[ErrorTemplate, ...]] = PMD_ERROR_TEMPLATES

    def process_stdout(self, raw: str) -> list[RuleResult]:
        """Parse a PMD XML report, emitting notifications for non-violation nodes.

        Args:
            raw: Text PMD wrote to stdout, possibly truncated or surrounded by logs.

        Returns:
            list[RuleResult]: One group per ``<file>`` node; empty when no report was found.
        """

        root = extract_report(raw)
        if root is None:
            return []
        results: list[RuleResult] = []
        for node in root:
            kind = _local_name(node.tag)
            if kind == "file":
                violations = tuple(
                    _violation_from_node(child) for child in node if _local_name(child.tag) == "violation"
                )
                file_name = node.attrib.get("name", "")
                results.append(RuleResult(engine=self.name, file_name=file_name, violations=violations))
                continue
            builder = _NOTIFICATION_BUILDERS.get(kind)
            if builder is not None:
                self.notify(Channel.WARNING_ALWAYS, builder(node.attrib))
        return results


__all__ = [
    "HEAP_EXHAUSTED_TEMPLATE",
    "JAVA_VERSION_TEMPLATE",
    "PMD_ERROR_TEMPLATES",
    "PmdEngine",
    "RULESET_NOT_FOUND_TEMPLATE",
    "extract_report",
]
