from .catalog import Option, default_catalog, flatten_catalog, load_catalog, validate_catalog
from .choice_resolver import ResolutionResult, resolve

__all__ = [
    "Option",
    "ResolutionResult",
    "default_catalog",
    "flatten_catalog",
    "load_catalog",
    "resolve",
    "validate_catalog",
]
