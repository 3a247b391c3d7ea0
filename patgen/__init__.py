__all__ = ['Pattern', 'PatternDomParser', 'PatternGrammarValidator', 'PatternComposer', 'PatternCombinationEngine', 'EventBMapper', 'EventBIR', 'GenerationService', 'GeneratorSettings', 'load_settings']

def __getattr__(name):
    if name in {'Pattern', 'PatternDomParser', 'PatternGrammarValidator'}:
        from .a_parse.dom_parser import PatternDomParser
        from .a_parse.grammar_validator import PatternGrammarValidator
        from .a_parse.pattern_model import Pattern
        return {'Pattern': Pattern, 'PatternDomParser': PatternDomParser, 'PatternGrammarValidator': PatternGrammarValidator}[name]
    if name in {'PatternComposer', 'PatternCombinationEngine'}:
        from .b_compose.combination_engine import PatternCombinationEngine
        from .b_compose.composer import PatternComposer
        return {'PatternComposer': PatternComposer, 'PatternCombinationEngine': PatternCombinationEngine}[name]
    if name in {'EventBMapper', 'EventBIR'}:
        from .c_eventb.mapper import EventBIR, EventBMapper
        return {'EventBMapper': EventBMapper, 'EventBIR': EventBIR}[name]
    if name == 'GenerationService':
        from .service.generation_service import GenerationService
        return GenerationService
    if name in {'GeneratorSettings', 'load_settings'}:
        from .config_manager import GeneratorSettings, load_settings
        return {'GeneratorSettings': GeneratorSettings, 'load_settings': load_settings}[name]
    raise AttributeError(f"module 'patgen' has no attribute '{name}'")
