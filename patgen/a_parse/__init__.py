from __future__ import annotations
from typing import TYPE_CHECKING, Any
__all__ = ['Action', 'Context', 'Event', 'Guard', 'Invariant', 'Param', 'Pattern', 'PatternDomParser', 'PatternGrammarValidator', 'Variable']
if TYPE_CHECKING:
    from .dom_parser import PatternDomParser
    from .grammar_validator import PatternGrammarValidator
    from .pattern_model import Action, Context, Event, Guard, Invariant, Param, Pattern, Variable
_EXPORTS: dict[str, tuple[str, str]] = {'PatternDomParser': ('dom_parser', 'PatternDomParser'), 'PatternGrammarValidator': ('grammar_validator', 'PatternGrammarValidator'), 'Action': ('pattern_model', 'Action'), 'Context': ('pattern_model', 'Context'), 'Event': ('pattern_model', 'Event'), 'Guard': ('pattern_model', 'Guard'), 'Invariant': ('pattern_model', 'Invariant'), 'Param': ('pattern_model', 'Param'), 'Pattern': ('pattern_model', 'Pattern'), 'Variable': ('pattern_model', 'Variable')}

def __getattr__(name: str) -> Any:
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(name)
    mod_name, attr = target
    module = __import__(f'{__name__}.{mod_name}', fromlist=[attr])
    return getattr(module, attr)

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))
