"""Build a SymbolTable from a rule definitions document.

The document is XML:

    <definitions>
      <facts>
        <fact name="food-amount"><param type="compareOp"/><param type="value"/></fact>
      </facts>
      <actions>
        <action name="train"><param type="unit"/></action>
      </actions>
      <parameters>
        <parameter type="unit">villager,archer,knight</parameter>
      </parameters>
    </definitions>

Element tag names below the sections are not checked; only the attributes are.
Anything malformed raises DefinitionsError, since a broken table would silently
degrade every editor feature.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from aiscript import config
from aiscript.errors import DefinitionsError
from aiscript.definitions.symbol_table import SymbolTable, ParamSpec, KEYWORDS, BOOLEAN_FACTS

log = logging.getLogger(__name__)


def _section(root: ET.Element, name: str) -> ET.Element:
    section = root.find(name)
    if section is None:
        raise DefinitionsError(f"Definitions document has no <{name}> section")
    return section


def _attribute(element: ET.Element, name: str, where: str) -> str:
    value = element.get(name)
    if value is None or not value.strip():
        raise DefinitionsError(f"<{element.tag}> in {where} is missing the '{name}' attribute")
    return value.strip()


def _read_commands(section: ET.Element) -> dict[str, ParamSpec]:
    commands: dict[str, ParamSpec] = {}
    for element in section:
        name = _attribute(element, "name", section.tag)
        if name in commands:
            raise DefinitionsError(f"Duplicate entry '{name}' in <{section.tag}>")
        if name in KEYWORDS or name in BOOLEAN_FACTS:
            raise DefinitionsError(f"'{name}' in <{section.tag}> collides with a keyword")
        types = tuple(_attribute(param, "type", f"'{name}'") for param in element)
        commands[name] = ParamSpec(types)
    return commands


def _read_parameters(section: ET.Element) -> dict[str, tuple[str, ...]]:
    parameters: dict[str, tuple[str, ...]] = {}
    for element in section:
        type_name = _attribute(element, "type", section.tag)
        if type_name in parameters:
            raise DefinitionsError(f"Duplicate parameter type '{type_name}'")
        values = (v.strip() for v in (element.text or "").split(","))
        parameters[type_name] = tuple(v for v in values if v)
    return parameters


def load_definitions(source: Union[str, bytes]) -> SymbolTable:
    try:
        root = ET.fromstring(source)
    except ET.ParseError as e:
        raise DefinitionsError(f"Cannot parse definitions document: {e}") from e

    facts = _read_commands(_section(root, "facts"))
    actions = _read_commands(_section(root, "actions"))
    parameters = _read_parameters(_section(root, "parameters"))

    table = SymbolTable(facts=facts, actions=actions, parameter_values=parameters)
    log.debug("Loaded %d facts, %d actions, %d parameter types",
              len(facts), len(actions), len(parameters))
    return table


def load_definitions_file(path: Union[str, Path]) -> SymbolTable:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DefinitionsError(f"Cannot read definitions file {path}: {e}") from e
    log.info("Reading rule definitions from %s", path)
    return load_definitions(data)


@lru_cache(maxsize=None)
def default_symbol_table() -> SymbolTable:
    """The process-wide table: AISCRIPT_DEFINITIONS if set, else the bundled document."""
    return load_definitions_file(config.get_definitions_path())


def resolve_symbols(symbols: Optional[SymbolTable]) -> SymbolTable:
    return symbols if symbols is not None else default_symbol_table()
