from __future__ import annotations
from typing import TYPE_CHECKING, Any
__all__ = ['GeneratedArchive', 'GenerationResult', 'GenerationService', 'PatternServiceClient', 'ServiceRequestError', 'build_archive', 'create_app']
if TYPE_CHECKING:
    from .archive import build_archive
    from .client import GeneratedArchive, PatternServiceClient, ServiceRequestError
    from .generation_service import GenerationResult, GenerationService
    from .server import create_app
_EXPORTS: dict[str, tuple[str, str]] = {'build_archive': ('archive', 'build_archive'), 'GeneratedArchive': ('client', 'GeneratedArchive'), 'PatternServiceClient': ('client', 'PatternServiceClient'), 'ServiceRequestError': ('client', 'ServiceRequestError'), 'GenerationResult': ('generation_service', 'GenerationResult'), 'GenerationService': ('generation_service', 'GenerationService'), 'create_app': ('server', 'create_app')}

def __getattr__(name: str) -> Any:
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(name)
    mod_name, attr = target
    module = __import__(f'{__name__}.{mod_name}', fromlist=[attr])
    return getattr(module, attr)

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))
