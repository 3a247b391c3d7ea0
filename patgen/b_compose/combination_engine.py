from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from ..a_parse.pattern_model import Action, Event, Guard, Param
logger = logging.getLogger(__name__)
COMPOSITE_SOURCE = 'Composite'
_WS_RE = re.compile('\\s+')
EventKey = Tuple[str, str]

@dataclass(frozen=True)
class EventRef:
    pattern: str
    event: str

    @property
    def key(self) -> EventKey:
        return (self.pattern.strip().lower(), self.event.strip().lower())

@dataclass(frozen=True)
class Rule:
    output_name: str
    refs: Tuple[EventRef, ...]

def _rule(output_name: str, *refs: Tuple[str, str]) -> Rule:
    return Rule(output_name=output_name, refs=tuple((EventRef(pattern, event) for pattern, event in refs)))
RULES: Tuple[Rule, ...] = (_rule('creating_Pkt', ('PPacket', 'creating_Pkt'), ('PNDBuffer', 'record_ndBuff')), _rule('start_tx', ('PSend', 'start_tx'), ('PNDBuffer', 'remove_ndBuff'), ('PPacket', 'set_pktFwdr')), _rule('receive', ('PReceive', 'receive'), ('PSend', 'remove_ctlNeighbours')), _rule('fwdr_receive_pkts', ('PReceive', 'fwdr_receive_pkts'), ('PNDBuffer', 'record_ndBuff')), _rule('dest_recv_pkts', ('PReceive', 'dest_recv_pkts'), ('PDestBuffer', 'record_destBuff')), _rule('finish_tx_pkts', ('PSend', 'finish_tx_pkts'), ('PNDBuffer', 'is_In_Range_ndBuff')), _rule('final_tx_pkts', ('PSend', 'final_tx_pkts'), ('PNDBuffer', 'isNot_In_Range_ndBuff')))

def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed.lower() if trimmed else None

def event_key(event: Optional[Event]) -> Optional[EventKey]:
    if event is None:
        return None
    pattern = _normalize(event.source_pattern)
    name = _normalize(event.name)
    if pattern is None or name is None:
        return None
    return (pattern, name)

def reconcile_type(current: Optional[str], incoming: Optional[str]) -> Optional[str]:
    candidate = (incoming or '').strip()
    if not candidate:
        return current
    existing = (current or '').strip()
    if not existing:
        return candidate
    if existing == candidate:
        return existing
    norm_existing = _WS_RE.sub('', existing)
    norm_candidate = _WS_RE.sub('', candidate)
    if norm_candidate.lower() == norm_existing.lower():
        return existing
    if norm_existing in norm_candidate:
        return candidate
    if norm_candidate in norm_existing:
        return existing
    # last resort: the longer text wins, which can pick the wrong one for look-alikes such as P(ND) vs P(NDext)
    return candidate if len(candidate) >= len(existing) else existing

def union_text(values: Iterable[Optional[str]]) -> List[str]:
    seen: Set[str] = set()
    out: List[str] = []
    for raw in values:
        if raw is None:
            continue
        text = raw.strip()
        if not text or text in seen:
            continue
        seen.add(text)
        out.append(text)
    return out

class PatternCombinationEngine:

    def __init__(self, rules: Sequence[Rule]=RULES) -> None:
        self.rules = tuple(rules)

    def apply(self, events: Optional[Sequence[Event]]) -> List[Event]:
        if not events:
            return []
        lookup: Dict[EventKey, Event] = {}
        for event in events:
            key = event_key(event)
            if key is not None and key not in lookup:
                lookup[key] = event
        consumed: Set[int] = set()
        composed: List[Event] = []
        for rule in self.rules:
            matches = [lookup.get(ref.key) for ref in rule.refs]
            if not matches or any((m is None for m in matches)):
                continue
            sources = [m for m in matches if m is not None]
            composed.append(self.merge(rule.output_name, sources))
            consumed.update((id(m) for m in sources))
            logger.debug('Rule %s fired on %s', rule.output_name, ', '.join((f'{m.source_pattern}.{m.name}' for m in sources)))
        composed.extend((event for event in events if id(event) not in consumed))
        return composed

    def merge(self, output_name: str, sources: Sequence[Event]) -> Event:
        name = output_name.strip() if output_name and output_name.strip() else sources[0].name
        source_names = union_text((e.source_pattern for e in sources))
        merged = Event(name=name, source_pattern='+'.join(source_names) or COMPOSITE_SOURCE)
        params: Dict[str, Param] = {}
        for event in sources:
            for param in event.params:
                if param is None or param.name is None:
                    continue
                pname = param.name.strip()
                if not pname:
                    continue
                ptype = param.type.strip() if param.type is not None else None
                existing = params.get(pname)
                if existing is None:
                    params[pname] = Param(name=pname, type=ptype)
                elif ptype:
                    existing.type = reconcile_type(existing.type, ptype)
        merged.params.extend(params.values())
        merged.guards.extend((Guard(expr=expr) for expr in union_text((g.expr for e in sources for g in e.guards if g is not None))))
        merged.actions.extend((Action(assignment=text) for text in union_text((a.assignment for e in sources for a in e.actions if a is not None))))
        return merged
