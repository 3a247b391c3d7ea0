from __future__ import annotations
from typing import TYPE_CHECKING, Any
__all__ = ['EventBIR', 'EventBMapper', 'EventBWriter', 'GrammarWriter', 'ProjectWorkspace', 'WrittenArtifacts', 'to_eventb']
if TYPE_CHECKING:
    from .grammar_writer import GrammarWriter
    from .mapper import EventBIR, EventBMapper, to_eventb
    from .workspace import ProjectWorkspace
    from .writer import EventBWriter, WrittenArtifacts
_EXPORTS: dict[str, tuple[str, str]] = {'EventBIR': ('mapper', 'EventBIR'), 'EventBMapper': ('mapper', 'EventBMapper'), 'to_eventb': ('mapper', 'to_eventb'), 'EventBWriter': ('writer', 'EventBWriter'), 'WrittenArtifacts': ('writer', 'WrittenArtifacts'), 'GrammarWriter': ('grammar_writer', 'GrammarWriter'), 'ProjectWorkspace': ('workspace', 'ProjectWorkspace')}

def __getattr__(name: str) -> Any:
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(name)
    mod_name, attr = target
    module = __import__(f'{__name__}.{mod_name}', fromlist=[attr])
    return getattr(module, attr)

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))
