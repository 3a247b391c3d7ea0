from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set
from ..a_parse.pattern_model import DEFAULT_PATTERN_NAME, INIT_EVENT_NAME, Action, Context, Event, Guard, Invariant, Param, Pattern, Variable
from ..errors import EmptyInput, VariableTypeConflict
from .combination_engine import COMPOSITE_SOURCE, PatternCombinationEngine, union_text
logger = logging.getLogger(__name__)
COMPOSITE_SUFFIX = '_Composite'
FALLBACK_COMPOSITE_NAME = 'PatternComposite'

def derive_name(models: Sequence[Optional[Pattern]]) -> str:
    for model in models:
        if model is None:
            continue
        name = (model.name or '').strip()
        if name and name.lower() != DEFAULT_PATTERN_NAME.lower():
            return name + COMPOSITE_SUFFIX
    return FALLBACK_COMPOSITE_NAME

def merge_contexts(models: Sequence[Optional[Pattern]]) -> Optional[Context]:
    sets: List[str] = []
    constants: List[str] = []
    axioms: List[str] = []
    for model in models:
        if model is None or model.context is None:
            continue
        for target, values in ((sets, model.context.sets), (constants, model.context.constants), (axioms, model.context.axioms)):
            for value in values:
                if value not in target:
                    target.append(value)
    if not (sets or constants or axioms):
        return None
    return Context(sets=sets, constants=constants, axioms=axioms)

def merge_variables(models: Sequence[Optional[Pattern]]) -> List[Variable]:
    seen: Dict[str, Optional[str]] = {}
    merged: List[Variable] = []
    for model in models:
        if model is None:
            continue
        for var in model.variables:
            if var is None or var.name is None:
                continue
            name = var.name.strip()
            if not name:
                continue
            if name in seen:
                if seen[name] != var.type:
                    raise VariableTypeConflict(name, seen[name], var.type)
                continue
            seen[name] = var.type
            merged.append(Variable(name=name, type=var.type))
    return merged

def merge_invariants(models: Sequence[Optional[Pattern]]) -> List[Invariant]:
    exprs = union_text((inv.expression for model in models if model is not None for inv in model.invariants if inv is not None))
    return [Invariant(expression=expr) for expr in exprs]

def copy_event(source: Event) -> Event:
    copy = Event(name=source.name, source_pattern=source.source_pattern)
    for param in source.params:
        if param is None or not (param.name or '').strip():
            continue
        ptype = param.type.strip() if param.type is not None else None
        copy.params.append(Param(name=param.name.strip(), type=ptype or None))
    for guard in source.guards:
        expr = (guard.expr or '').strip() if guard is not None else ''
        if expr:
            copy.guards.append(Guard(expr=expr))
    for action in source.actions:
        assignment = (action.assignment or '').strip() if action is not None else ''
        if assignment:
            copy.actions.append(Action(assignment=assignment))
    return copy

def events_equivalent(a: Event, b: Event) -> bool:
    if a.name != b.name:
        return False
    if [(p.name, p.type) for p in a.params] != [(p.name, p.type) for p in b.params]:
        return False
    if [g.expr for g in a.guards] != [g.expr for g in b.guards]:
        return False
    return [x.assignment for x in a.actions] == [x.assignment for x in b.actions]

class PatternComposer:

    def __init__(self, combination_engine: Optional[PatternCombinationEngine]=None) -> None:
        self.combination_engine = combination_engine or PatternCombinationEngine()

    def compose(self, models: Sequence[Optional[Pattern]]) -> Pattern:
        if not models:
            raise EmptyInput('At least one pattern model is required for composition')
        result = Pattern(name=derive_name(models), context=merge_contexts(models), variables=merge_variables(models), invariants=merge_invariants(models))
        result.events.extend(self._merge_events(models))
        logger.info('Composed %d patterns into %s: %d variables, %d invariants, %d events', len(models), result.name, len(result.variables), len(result.invariants), len(result.events))
        return result

    def _merge_events(self, models: Sequence[Optional[Pattern]]) -> List[Event]:
        init_actions: List[Optional[str]] = []
        collected: List[Event] = []
        for model in models:
            if model is None:
                continue
            for event in model.events:
                if event is None or event.name is None:
                    continue
                if event.is_initialisation:
                    init_actions.extend((a.assignment for a in event.actions if a is not None))
                    continue
                copy = copy_event(event)
                if not (copy.source_pattern or '').strip():
                    copy.source_pattern = model.name
                collected.append(copy)
        init_event = Event(name=INIT_EVENT_NAME, source_pattern=COMPOSITE_SOURCE, actions=[Action(assignment=text) for text in union_text(init_actions)])
        processed = self.combination_engine.apply(collected)
        return [init_event] + self._dedupe_by_name(processed)

    def _dedupe_by_name(self, events: Sequence[Event]) -> List[Event]:
        by_name: Dict[str, Event] = {}
        taken: Set[str] = set()
        out: List[Event] = []
        for event in events:
            if event is None or event.name is None:
                continue
            base = event.name.strip()
            if not base:
                continue
            existing = by_name.get(base)
            if existing is not None and events_equivalent(existing, replace(event, name=base)):
                logger.debug('Dropping duplicate event %s from %s', base, event.source_pattern)
                continue
            candidate = base
            suffix = 2
            while candidate.lower() in taken:
                candidate = f'{base}_{suffix}'
                suffix += 1
            taken.add(candidate.lower())
            if candidate != base:
                logger.debug('Renamed event %s from %s to %s', base, event.source_pattern, candidate)
            renamed = replace(event, name=candidate)
            by_name[candidate] = renamed
            out.append(renamed)
        return out
