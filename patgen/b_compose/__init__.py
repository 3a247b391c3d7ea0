from __future__ import annotations
from typing import TYPE_CHECKING, Any
__all__ = ['EventRef', 'PatternCombinationEngine', 'PatternComposer', 'RULES', 'Rule']
if TYPE_CHECKING:
    from .combination_engine import RULES, EventRef, PatternCombinationEngine, Rule
    from .composer import PatternComposer

def __getattr__(name: str) -> Any:
    if name in {'EventRef', 'PatternCombinationEngine', 'RULES', 'Rule'}:
        from . import combination_engine
        return getattr(combination_engine, name)
    if name == 'PatternComposer':
        from .composer import PatternComposer
        return PatternComposer
    raise AttributeError(name)

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))
