from __future__ import annotations
import re
import xml.etree.ElementTree as ET
from typing import List, Optional, Set
from ..errors import SchemaViolation
NAME_PATTERN_SRC = '[A-Za-z_:][A-Za-z0-9_\\-.:]*'
NAME_RE = re.compile(f'^{NAME_PATTERN_SRC}$')
NAME_LIST_RE = re.compile(f'^\\s*{NAME_PATTERN_SRC}(\\s*,\\s*{NAME_PATTERN_SRC})*\\s*$')

def local_name(tag: object) -> str:
    text = str(tag or '')
    if text.startswith('{'):
        return text.split('}', 1)[1]
    return text

def child_elements(element: ET.Element) -> List[ET.Element]:
    return [child for child in element if isinstance(child.tag, str)]

def attr_or_none(element: ET.Element, name: str) -> Optional[str]:
    value = element.get(name)
    return value.strip() if value is not None else None

class PatternGrammarValidator:

    def validate_bundle(self, root: ET.Element) -> None:
        self._require_tag(root, 'PatternBundle')
        self._require_name(self._require_attr(root, 'name', 'PatternBundle name'), 'PatternBundle name', root)
        contexts: List[ET.Element] = []
        pattern_el: Optional[ET.Element] = None
        for el in child_elements(root):
            tag = local_name(el.tag)
            if tag == 'Context':
                contexts.append(el)
            elif tag == 'Pattern':
                if pattern_el is not None:
                    raise SchemaViolation('PatternBundle must contain exactly one <Pattern>', element='PatternBundle')
                pattern_el = el
            else:
                raise SchemaViolation(f'Unexpected element <{tag}> in <PatternBundle>', element=tag)
        if pattern_el is None:
            raise SchemaViolation('PatternBundle is missing a <Pattern> element', element='PatternBundle')
        names: Set[str] = set()
        for ctx in contexts:
            name = self.validate_context(ctx)
            if name in names:
                raise SchemaViolation(f"Duplicate context name '{name}'", element='Context')
            names.add(name)
        self.validate_pattern(pattern_el, names, require_type=True)

    def validate_legacy_pattern(self, root: ET.Element) -> None:
        self.validate_pattern(root, set(), require_type=False, allow_inline_context=True, name_optional=True)

    def validate_context(self, ctx_el: ET.Element, *, require_name: bool=True) -> str:
        self._require_tag(ctx_el, 'Context')
        name = ''
        if require_name:
            name = self._require_attr(ctx_el, 'name', 'Context name')
            self._require_name(name, 'Context name', ctx_el)
        for el in child_elements(ctx_el):
            tag = local_name(el.tag)
            if tag == 'Sets':
                self._validate_named(el, 'Set')
            elif tag == 'Constants':
                self._validate_named(el, 'Constant')
            elif tag == 'Axioms':
                self._validate_expressions(el, 'Axiom', require_one=False)
            else:
                raise SchemaViolation(f'Unexpected element <{tag}> in <Context>', element=tag)
        return name

    def validate_pattern(self, pattern_el: ET.Element, context_names: Set[str], *, require_type: bool, allow_inline_context: bool=False, name_optional: bool=False) -> None:
        self._require_tag(pattern_el, 'Pattern')
        if not (name_optional and pattern_el.get('name') is None):
            self._require_name(self._require_attr(pattern_el, 'name', 'Pattern name'), 'Pattern name', pattern_el)
        if require_type:
            self._require_attr(pattern_el, 'type', 'Pattern type')
        seen: Set[str] = set()
        for el in child_elements(pattern_el):
            tag = local_name(el.tag)
            if tag == 'Context' and (not allow_inline_context):
                raise SchemaViolation('Unexpected element <Context> in <Pattern>', element=tag)
            if tag not in {'ContextRef', 'Context', 'Variables', 'Invariants', 'Initialisation', 'Events'}:
                raise SchemaViolation(f'Unexpected element <{tag}> in <Pattern>', element=tag)
            if tag in seen:
                if tag == 'ContextRef':
                    raise SchemaViolation('Pattern must not contain multiple <ContextRef> elements', element=tag)
                raise SchemaViolation(f'Duplicate <{tag}> section', element=tag)
            seen.add(tag)
            if tag == 'ContextRef':
                name = self._require_attr(el, 'name', 'ContextRef name')
                self._require_name(name, 'ContextRef name', el)
                if context_names and name not in context_names:
                    raise SchemaViolation(f"ContextRef references unknown context '{name}'", element=tag)
            elif tag == 'Context':
                self.validate_context(el, require_name=False)
            elif tag == 'Variables':
                self._validate_variables(el)
            elif tag == 'Invariants':
                self._validate_expressions(el, 'Invariant', require_one=False)
            elif tag == 'Initialisation':
                self._validate_actions(el)
            else:
                self._validate_events(el)
        if len(context_names) > 1 and 'ContextRef' not in seen:
            raise SchemaViolation('Pattern must declare a <ContextRef> when the bundle has several contexts', element='Pattern')

    def _validate_variables(self, variables_el: ET.Element) -> None:
        for el in child_elements(variables_el):
            self._require_tag(el, 'Variable')
            self._require_name(self._require_attr(el, 'name', 'Variable name'), 'Variable name', el)
            self._require_attr(el, 'type', 'Variable type')

    def _validate_events(self, events_el: ET.Element) -> None:
        events = child_elements(events_el)
        if not events:
            raise SchemaViolation('<Events> must contain at least one <Event>', element='Events')
        for el in events:
            self._require_tag(el, 'Event')
            self._validate_event(el)

    def _validate_event(self, event_el: ET.Element) -> None:
        name = self._require_attr(event_el, 'name', 'Event name')
        self._require_name(name, 'Event name', event_el)
        seen: Set[str] = set()
        for el in child_elements(event_el):
            tag = local_name(el.tag)
            if tag not in {'Parameters', 'Guards', 'Actions'}:
                raise SchemaViolation(f'Unexpected element <{tag}> in <Event>', element=tag)
            if tag in seen:
                raise SchemaViolation(f"Event '{name}' has duplicate <{tag}> sections", element=tag)
            seen.add(tag)
            if tag == 'Parameters':
                self._validate_parameters(el, name)
            elif tag == 'Guards':
                self._validate_expressions(el, 'Guard', require_one=True)
            else:
                self._validate_actions(el)
        if 'Actions' not in seen:
            raise SchemaViolation(f"Event '{name}' must contain an <Actions> section", element='Event')

    def _validate_parameters(self, params_el: ET.Element, event_name: str) -> None:
        params = child_elements(params_el)
        if not params:
            raise SchemaViolation(f"Event '{event_name}' has an empty <Parameters> section", element='Parameters')
        for el in params:
            self._require_tag(el, 'Param')
            self._require_name(self._require_attr(el, 'name', 'Param name'), 'Param name', el)

    def _validate_named(self, parent: ET.Element, expected: str) -> None:
        for el in child_elements(parent):
            self._require_tag(el, expected)
            self._require_name(self._require_attr(el, 'name', f'{expected} name'), f'{expected} name', el)

    def _validate_expressions(self, parent: ET.Element, expected: str, *, require_one: bool) -> None:
        items = child_elements(parent)
        for el in items:
            self._require_tag(el, expected)
            self._require_attr(el, 'expression', f'{expected} expression')
        if require_one and (not items):
            raise SchemaViolation(f'<{local_name(parent.tag)}> must contain at least one <{expected}>', element=local_name(parent.tag))

    def _validate_actions(self, parent: ET.Element) -> None:
        actions = child_elements(parent)
        if not actions:
            raise SchemaViolation(f'<{local_name(parent.tag)}> must contain at least one <Action>', element=local_name(parent.tag))
        for el in actions:
            self._require_tag(el, 'Action')
            self._validate_action(el)

    def _validate_action(self, action_el: ET.Element) -> None:
        single_var = attr_or_none(action_el, 'var')
        single_value = attr_or_none(action_el, 'value')
        multi_vars = attr_or_none(action_el, 'vars')
        multi_values = attr_or_none(action_el, 'values')
        single = bool(single_var)
        multi = bool(multi_vars)
        if single and multi:
            raise SchemaViolation("Action cannot mix 'var' with 'vars'", element='Action')
        if multi:
            if not multi_values:
                raise SchemaViolation("Action with 'vars' must include matching 'values'", element='Action')
            if not NAME_LIST_RE.match(multi_vars or ''):
                raise SchemaViolation("Action 'vars' must be a comma separated list of names", element='Action')
            if len(split_csv(multi_vars)) != len(split_csv(multi_values)):
                raise SchemaViolation(f"Action 'vars' ({multi_vars}) and 'values' ({multi_values}) differ in length", element='Action')
        elif multi_values:
            raise SchemaViolation("Action with 'values' must be accompanied by 'vars'", element='Action')
        if single:
            if (single_var or '').lower() != 'skip' and (not single_value):
                raise SchemaViolation("Action with 'var' must include a non-empty 'value'", element='Action')
        elif not multi:
            raise SchemaViolation("Action must specify either 'var' or 'vars'", element='Action')

    def _require_tag(self, element: ET.Element, expected: str) -> None:
        tag = local_name(element.tag)
        if tag != expected:
            raise SchemaViolation(f'Expected <{expected}> but found <{tag}>', element=tag)

    def _require_attr(self, element: ET.Element, name: str, description: str) -> str:
        tag = local_name(element.tag)
        value = element.get(name)
        if value is None:
            raise SchemaViolation(f'{description} is required on <{tag}>', element=tag)
        value = value.strip()
        if not value:
            raise SchemaViolation(f'{description} must not be blank on <{tag}>', element=tag)
        return value

    def _require_name(self, value: str, description: str, element: ET.Element) -> None:
        if not NAME_RE.match(value):
            raise SchemaViolation(f"{description} contains an invalid identifier: '{value}'", element=local_name(element.tag))

def split_csv(value: Optional[str]) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    for ch in value or '':
        if ch in '([{':
            depth += 1
        elif ch in ')]}':
            depth = max(0, depth - 1)
        elif ch == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append(''.join(current).strip())
    return [part for part in parts if part]
