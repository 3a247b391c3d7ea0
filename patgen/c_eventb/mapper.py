from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional
from ..a_parse.pattern_model import Event, Pattern
from ..b_compose.combination_engine import union_text
logger = logging.getLogger(__name__)
INDENT = '  '
MEMBERSHIP_OP = '∈'
_WS_RE = re.compile('\\s+')

@dataclass(frozen=True)
class EventBIR:
    base_name: str
    refinement_index: int
    context_name: str
    machine_name: str
    context_text: str
    machine_text: str

    @property
    def context_filename(self) -> str:
        return f'{self.context_name}.ctx'

    @property
    def machine_filename(self) -> str:
        return f'{self.machine_name}.bcm'

def context_name_for(base: str, refinement_index: int) -> str:
    return f'{base}_C{refinement_index}'

def machine_name_for(base: str, refinement_index: int) -> str:
    return f'{base}_M{refinement_index}'

def label(prefix: str, number: int) -> str:
    return f'@{prefix}{number:02d}'

class _TextBuilder:

    def __init__(self) -> None:
        self._lines: List[str] = []

    def line(self, text: str='', depth: int=0) -> '_TextBuilder':
        self._lines.append(INDENT * depth + text if text else '')
        return self

    def section(self, header: str, items: Iterable[str], depth: int=1) -> None:
        self.line(header)
        for item in items:
            self.line(item, depth)
        self.line()

    def render(self) -> str:
        return '\n'.join(self._lines) + '\n'

def _numbered(prefix: str, values: Iterable[str]) -> List[str]:
    return [f'{label(prefix, idx)} {value}' for idx, value in enumerate(values, start=1)]

def _squash(text: str) -> str:
    return _WS_RE.sub('', text or '')

class EventBMapper:

    def to_eventb(self, model: Pattern, refinement_index: int=0) -> EventBIR:
        if refinement_index < 0:
            raise ValueError(f'refinement_index must be >= 0, got {refinement_index}')
        base = (model.name or '').strip() or 'Pattern'
        ctx_name = context_name_for(base, refinement_index)
        mch_name = machine_name_for(base, refinement_index)
        ir = EventBIR(base_name=base, refinement_index=refinement_index, context_name=ctx_name, machine_name=mch_name, context_text=self.render_context(model, ctx_name), machine_text=self.render_machine(model, mch_name, ctx_name))
        logger.debug('Mapped %s to %s / %s', base, ctx_name, mch_name)
        return ir

    def render_context(self, model: Pattern, ctx_name: str) -> str:
        out = _TextBuilder().line(f'context {ctx_name}')
        ctx = model.context
        if ctx is not None:
            if ctx.sets:
                out.section('sets', ctx.sets)
            if ctx.constants:
                out.section('constants', ctx.constants)
            if ctx.axioms:
                out.section('axioms', _numbered('ax', ctx.axioms))
        out.line('end')
        return out.render()

    def render_machine(self, model: Pattern, mch_name: str, ctx_name: str) -> str:
        out = _TextBuilder()
        out.line(f'machine {mch_name}').line(f'sees {ctx_name}').line()
        if model.variables:
            out.section('variables', [v.name for v in model.variables])
        if model.invariants:
            out.section('invariants', _numbered('inv', [inv.expression for inv in model.invariants]))
        out.line('events')
        init_events = [e for e in model.events if e.is_initialisation]
        self._render_init(out, union_text((a.assignment for e in init_events for a in e.actions)))
        for event in model.events:
            if event.is_initialisation:
                continue
            self._render_event(out, event)
        out.line('end')
        return out.render()

    def _render_init(self, out: _TextBuilder, assignments: List[str]) -> None:
        out.line('event INITIALISATION', 1)
        out.line('then', 2)
        for entry in _numbered('int', assignments or ['skip']):
            out.line(entry, 3)
        out.line('end', 1).line()

    def _render_event(self, out: _TextBuilder, event: Event) -> None:
        out.line(f'event {event.name}', 1)
        params = [p for p in event.params if (p.name or '').strip()]
        if params:
            out.line('any ' + ' '.join((p.name.strip() for p in params)), 2)
        guards = self.guard_lines(event)
        if guards:
            out.line('where', 2)
            for entry in _numbered('g', guards):
                out.line(entry, 3)
        actions = [a.assignment.strip() for a in event.actions if (a.assignment or '').strip()]
        if actions:
            out.line('then', 2)
            for entry in _numbered('a', actions):
                out.line(entry, 3)
        out.line('end', 1).line()

    def guard_lines(self, event: Event) -> List[str]:
        explicit = [g.expr.strip() for g in event.guards if (g.expr or '').strip()]
        squashed = {_squash(expr) for expr in explicit}
        implicit: List[str] = []
        for param in event.params:
            name = (param.name or '').strip()
            ptype = (param.type or '').strip()
            if not name or not ptype:
                continue
            membership = f'{name} {MEMBERSHIP_OP} {ptype}'
            if _squash(membership) in squashed:
                continue
            implicit.append(membership)
        return implicit + explicit

def to_eventb(model: Pattern, refinement_index: int=0, mapper: Optional[EventBMapper]=None) -> EventBIR:
    return (mapper or EventBMapper()).to_eventb(model, refinement_index)
