from __future__ import annotations

import json
import logging
import math
import operator
import re
from typing import Any, Callable, Mapping, NamedTuple

from cachetools import Cache, cachedmethod

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"{{([^}]+)}}")

CompiledTemplate = Callable[[Mapping[str, Any]], str]


class Lookup(NamedTuple):
    found: bool
    value: Any = None


def lookup_path(variables: Mapping[str, Any], path: str) -> Lookup:
    """
    Walks `variables` one dotted segment at a time.
    Any missing segment or non-mapping intermediate is a miss.
    """
    value: Any = variables
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return Lookup(False)
        value = value[part]
    return Lookup(True, value)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def parse_metadata(metadata: str | None) -> dict[str, Any]:
    if not metadata:
        return {}
    try:
        value = json.loads(metadata)
    except (TypeError, ValueError):
        logger.warning("Job metadata is not valid JSON, using empty metadata")
        return {}
    if not isinstance(value, dict):
        logger.warning("Job metadata is not a JSON dict: %s", metadata)
        return {}
    return value


class VariableTemplater:
    """
    Renders `{{namespace.path}}` placeholders against job metadata plus any
    extra namespaces (e.g. `secrets`). Compiled templates are cached per
    instance, keyed by the template source.
    """

    def __init__(self, metadata: str | None, additional: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        variables: dict[str, Any] = {"metadata": parse_metadata(metadata)}
        if additional:
            variables.update({name: dict(ns) for name, ns in additional.items()})
        self._variables = variables
        self._cache: Cache = Cache(maxsize=math.inf)
        self.compile_count = 0

    @property
    def variables(self) -> Mapping[str, Any]:
        return self._variables

    @cachedmethod(operator.attrgetter("_cache"))
    def compile(self, template: str) -> CompiledTemplate:
        self.compile_count += 1

        def _replace(match: re.Match, variables: Mapping[str, Any]) -> str:
            found, value = lookup_path(variables, match.group(1).strip())
            if not found:
                return match.group(0)
            return _stringify(value)

        def compiled(variables: Mapping[str, Any]) -> str:
            return _PLACEHOLDER.sub(lambda m: _replace(m, variables), template)

        return compiled

    def render(self, template: str) -> str:
        return self.compile(template)(self._variables)

    def render_or_default(self, template: str, default: str | None) -> str | None:
        """
        Renders `template`, returning `default` when the result is empty or
        still carries an unresolved placeholder (i.e. "not configured").
        """
        rendered = self.render(template)
        if not rendered or _PLACEHOLDER.search(rendered):
            return default
        return rendered
