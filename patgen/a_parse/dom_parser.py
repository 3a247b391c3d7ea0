from __future__ import annotations
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union
from ..errors import MalformedDocument, ResourceError, SchemaViolation
from .grammar_validator import PatternGrammarValidator, attr_or_none, child_elements, local_name, split_csv
from .pattern_model import DEFAULT_PATTERN_NAME, INIT_EVENT_NAME, Action, Context, Event, Guard, Invariant, Param, Pattern, Variable
logger = logging.getLogger(__name__)
ASSIGN_OP = '≔'
BUNDLE_TAG = 'PatternBundle'
PATTERN_TAG = 'Pattern'

def _first_child(element: ET.Element, tag: str) -> Optional[ET.Element]:
    for child in child_elements(element):
        if local_name(child.tag) == tag:
            return child
    return None

def _children(element: Optional[ET.Element], tag: str) -> List[ET.Element]:
    if element is None:
        return []
    return [child for child in child_elements(element) if local_name(child.tag) == tag]

def _expression(element: ET.Element) -> str:
    value = attr_or_none(element, 'expression')
    if value:
        return value
    return (element.text or '').strip()

def render_action(element: ET.Element) -> Optional[str]:
    single_var = attr_or_none(element, 'var')
    if single_var:
        value = attr_or_none(element, 'value')
        if single_var.lower() == 'skip' or not value or value.lower() == 'skip':
            return None
        return f'{single_var} {ASSIGN_OP} {value}'
    names = split_csv(attr_or_none(element, 'vars'))
    values = split_csv(attr_or_none(element, 'values'))
    if not names or not values:
        return None
    if len(values) == 1 and values[0].lower() == 'skip':
        return None
    return f"{', '.join(names)} {ASSIGN_OP} {', '.join(values)}"

class PatternDomParser:

    def __init__(self, validator: Optional[PatternGrammarValidator]=None) -> None:
        self.validator = validator or PatternGrammarValidator()

    def parse(self, xml_path: Union[str, Path]) -> Pattern:
        path = Path(xml_path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ResourceError(f'Cannot read pattern document: {exc}', path=path) from exc
        return self.parse_bytes(data, source=path)

    def parse_bytes(self, data: Union[bytes, str], *, source: Optional[Union[str, Path]]=None) -> Pattern:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise MalformedDocument(f'Invalid XML: {exc}', source=source) from exc
        tag = local_name(root.tag)
        if tag == BUNDLE_TAG:
            self.validator.validate_bundle(root)
            model = self._parse_bundle(root)
        elif tag == PATTERN_TAG:
            self.validator.validate_legacy_pattern(root)
            model = self._parse_pattern(root, _first_child(root, 'Context'))
        else:
            raise MalformedDocument(f'Root element must be <{BUNDLE_TAG}> or <{PATTERN_TAG}>, got <{tag}>', source=source)
        logger.debug('Parsed pattern %s: %d variables, %d invariants, %d events', model.name, len(model.variables), len(model.invariants), len(model.events))
        return model

    def _parse_bundle(self, root: ET.Element) -> Pattern:
        contexts: Dict[str, ET.Element] = {}
        for ctx_el in _children(root, 'Context'):
            contexts[attr_or_none(ctx_el, 'name') or ''] = ctx_el
        pattern_el = _first_child(root, PATTERN_TAG)
        if pattern_el is None:
            raise SchemaViolation('PatternBundle is missing a <Pattern> element', element=BUNDLE_TAG)
        ref_el = _first_child(pattern_el, 'ContextRef')
        ctx_el: Optional[ET.Element] = None
        if ref_el is not None:
            ctx_el = contexts.get(attr_or_none(ref_el, 'name') or '')
        elif len(contexts) == 1:
            ctx_el = next(iter(contexts.values()))
        return self._parse_pattern(pattern_el, ctx_el)

    def _parse_pattern(self, pattern_el: ET.Element, ctx_el: Optional[ET.Element]) -> Pattern:
        name = attr_or_none(pattern_el, 'name') or DEFAULT_PATTERN_NAME
        model = Pattern(name=name, context=self._parse_context(ctx_el))
        for var_el in _children(_first_child(pattern_el, 'Variables'), 'Variable'):
            model.variables.append(Variable(name=attr_or_none(var_el, 'name') or '', type=attr_or_none(var_el, 'type')))
        for inv_el in _children(_first_child(pattern_el, 'Invariants'), 'Invariant'):
            model.invariants.append(Invariant(expression=_expression(inv_el)))
        init_el = _first_child(pattern_el, 'Initialisation')
        if init_el is not None:
            init = Event(name=INIT_EVENT_NAME, source_pattern=name)
            init.actions.extend(self._parse_actions(init_el, INIT_EVENT_NAME))
            model.events.append(init)
        for event_el in _children(_first_child(pattern_el, 'Events'), 'Event'):
            model.events.append(self._parse_event(event_el, name))
        return model

    def _parse_context(self, ctx_el: Optional[ET.Element]) -> Optional[Context]:
        if ctx_el is None:
            return None
        ctx = Context()
        for set_el in _children(_first_child(ctx_el, 'Sets'), 'Set'):
            value = attr_or_none(set_el, 'name')
            if value and value not in ctx.sets:
                ctx.sets.append(value)
        for const_el in _children(_first_child(ctx_el, 'Constants'), 'Constant'):
            value = attr_or_none(const_el, 'name')
            if value:
                ctx.constants.append(value)
        for ax_el in _children(_first_child(ctx_el, 'Axioms'), 'Axiom'):
            value = _expression(ax_el)
            if value:
                ctx.axioms.append(value)
        return None if ctx.is_empty() else ctx

    def _parse_event(self, event_el: ET.Element, pattern_name: str) -> Event:
        event = Event(name=attr_or_none(event_el, 'name') or '', source_pattern=pattern_name)
        for param_el in _children(_first_child(event_el, 'Parameters'), 'Param'):
            event.params.append(Param(name=attr_or_none(param_el, 'name') or '', type=attr_or_none(param_el, 'type') or None))
        for guard_el in _children(_first_child(event_el, 'Guards'), 'Guard'):
            event.guards.append(Guard(expr=_expression(guard_el)))
        actions_el = _first_child(event_el, 'Actions')
        if actions_el is not None:
            event.actions.extend(self._parse_actions(actions_el, event.name))
        return event

    def _parse_actions(self, parent: ET.Element, owner: str) -> List[Action]:
        actions: List[Action] = []
        for action_el in _children(parent, 'Action'):
            assignment = render_action(action_el)
            if assignment is None:
                logger.debug('Dropping skip/empty action in %s: %s', owner, dict(action_el.attrib))
                continue
            actions.append(Action(assignment=assignment))
        return actions
