from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
DEFAULT_PATTERN_NAME = 'Pattern'
INIT_EVENT_NAME = 'Initialisation'

@dataclass
class Variable:
    name: str
    type: Optional[str] = None

@dataclass
class Invariant:
    expression: str

@dataclass
class Param:
    name: str
    type: Optional[str] = None

@dataclass
class Guard:
    expr: str

@dataclass
class Action:
    assignment: str

@dataclass
class Event:
    name: str
    source_pattern: Optional[str] = None
    params: List[Param] = field(default_factory=list)
    guards: List[Guard] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)

    @property
    def is_initialisation(self) -> bool:
        return (self.name or '').strip().lower() == INIT_EVENT_NAME.lower()

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'name': self.name}
        if self.source_pattern:
            payload['source_pattern'] = self.source_pattern
        if self.params:
            payload['params'] = [{'name': p.name, 'type': p.type} if p.type else {'name': p.name} for p in self.params]
        if self.guards:
            payload['guards'] = [g.expr for g in self.guards]
        if self.actions:
            payload['actions'] = [a.assignment for a in self.actions]
        return payload

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Event':
        params: List[Param] = []
        for entry in raw.get('params') or []:
            if isinstance(entry, dict):
                params.append(Param(name=str(entry.get('name') or ''), type=_opt_str(entry.get('type'))))
            elif entry is not None:
                params.append(Param(name=str(entry)))
        guards = [Guard(expr=str(g)) for g in raw.get('guards') or [] if g is not None]
        actions = [Action(assignment=str(a)) for a in raw.get('actions') or [] if a is not None]
        return cls(name=str(raw.get('name') or ''), source_pattern=_opt_str(raw.get('source_pattern')), params=params, guards=guards, actions=actions)

@dataclass
class Context:
    sets: List[str] = field(default_factory=list)
    constants: List[str] = field(default_factory=list)
    axioms: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.sets or self.constants or self.axioms)

    def to_dict(self) -> Dict[str, Any]:
        return {'sets': list(self.sets), 'constants': list(self.constants), 'axioms': list(self.axioms)}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Context':
        return cls(sets=_str_list(raw.get('sets')), constants=_str_list(raw.get('constants')), axioms=_str_list(raw.get('axioms')))

@dataclass
class Pattern:
    name: str = DEFAULT_PATTERN_NAME
    context: Optional[Context] = None
    variables: List[Variable] = field(default_factory=list)
    invariants: List[Invariant] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)

    def init_event(self) -> Optional[Event]:
        for event in self.events:
            if event.is_initialisation:
                return event
        return None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'name': self.name}
        if self.context is not None:
            payload['context'] = self.context.to_dict()
        payload['variables'] = [{'name': v.name, 'type': v.type} for v in self.variables]
        payload['invariants'] = [inv.expression for inv in self.invariants]
        payload['events'] = [e.to_dict() for e in self.events]
        return payload

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Pattern':
        raw = raw or {}
        ctx_raw = raw.get('context')
        context = Context.from_dict(ctx_raw) if isinstance(ctx_raw, dict) else None
        variables = [Variable(name=str(v.get('name') or ''), type=_opt_str(v.get('type'))) for v in raw.get('variables') or [] if isinstance(v, dict)]
        invariants = [Invariant(expression=str(inv)) for inv in raw.get('invariants') or [] if inv is not None]
        events = [Event.from_dict(e) for e in raw.get('events') or [] if isinstance(e, dict)]
        return cls(name=str(raw.get('name') or DEFAULT_PATTERN_NAME), context=context, variables=variables, invariants=invariants, events=events)

def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)

def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]
