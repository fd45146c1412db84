"""Lark parser for the GLSL function signatures carried by node definitions."""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from lark import Lark, Transformer, Token
from lark.exceptions import LarkError

_GRAMMAR_PATH = Path(__file__).parent.parent / "grammar" / "signature.lark"

_parser = Lark(
    _GRAMMAR_PATH.read_text(encoding="utf-8"),
    parser="lalr",
)

# Types a node function may take or return
GLSL_TYPES = frozenset({
    "float", "int", "bool",
    "vec2", "vec3", "vec4",
    "ivec2", "ivec3", "ivec4",
    "mat2", "mat3", "mat4",
})


class SignatureError(ValueError):
    pass


@dataclass(frozen=True)
class SignatureParam:
    type_name: str
    name: str
    qualifier: str = ""


@dataclass(frozen=True)
class FunctionSignature:
    return_type: str
    name: str
    params: tuple[SignatureParam, ...] = ()

    @property
    def param_types(self) -> tuple[str, ...]:
        return tuple(p.type_name for p in self.params)


class SignatureTransformer(Transformer):
    """Transforms a Lark parse tree into a FunctionSignature."""

    def start(self, items):
        return_type, name = str(items[0]), str(items[1])
        params = items[2] if len(items) > 2 else []
        return FunctionSignature(return_type, name, tuple(params))

    def params(self, items):
        return list(items)

    def param(self, items):
        qualifier = ""
        if len(items) == 3:
            qualifier = items[0]
            items = items[1:]
        type_name, name = (str(t) for t in items)
        return SignatureParam(type_name, name, qualifier)

    def qualifier(self, items):
        tok = items[0]
        return str(tok) if isinstance(tok, Token) else tok


@lru_cache(maxsize=None)
def parse_signature(source: str) -> FunctionSignature:
    """Parse a signature such as ``float opUnion(float d1, float d2)``.

    Raises SignatureError on malformed text or an unknown GLSL type.
    """
    try:
        tree = _parser.parse(source)
    except LarkError as e:
        raise SignatureError(f"Malformed GLSL signature '{source}': {e}") from e
    sig = SignatureTransformer().transform(tree)

    for type_name in (sig.return_type, *sig.param_types):
        if type_name not in GLSL_TYPES:
            raise SignatureError(
                f"Unsupported GLSL type '{type_name}' in signature '{source}'"
            )
    return sig
