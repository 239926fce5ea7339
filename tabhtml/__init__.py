from .compiler import (
    NO_TAG,
    EmptyInputError,
    IndentationJumpError,
    Line,
    TabhtmlCompiler,
    TabhtmlError,
    UnresolvedAttributeSyntax,
    compile_template,
    render,
)
from .preprocessor import normalize

__all__ = [
    'NO_TAG',
    'EmptyInputError',
    'IndentationJumpError',
    'Line',
    'TabhtmlCompiler',
    'TabhtmlError',
    'UnresolvedAttributeSyntax',
    'compile_template',
    'normalize',
    'render',
]
