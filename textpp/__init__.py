"""
textpp - plain-text preprocessor

Expands a small directive language (#include, #ifdef, #ifndef, #if, #else,
#endif) and `$$NAME$$` variables in arbitrary text, driven by NAME[=VALUE]
definitions.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .definitions import Definitions
from .errors import PreprocessError, ExpressionError, DirectiveStructureError, IncludeCycleError
from .preprocessor import Preprocessor, PreprocessResult, preprocess_file

__all__ = [
    'Definitions',
    'PreprocessError',
    'ExpressionError',
    'DirectiveStructureError',
    'IncludeCycleError',
    'Preprocessor',
    'PreprocessResult',
    'preprocess_file',
]
