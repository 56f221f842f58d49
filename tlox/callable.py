"""Uniform invocation contract for user-defined and native functions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from .ast import FuncDecl
from .environment import Environment
from .errors import ReturnSignal

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable(ABC):
    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        ...


class LoxFunction(LoxCallable):
    """A user-defined function closed over the scope it was declared in."""
    def __init__(self, declaration: FuncDecl, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        call_env = Environment(parent=self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            call_env.define(param.lexeme, arg)
        res = interpreter.execute_block(self.declaration.body, call_env)
        if isinstance(res, ReturnSignal):
            return res.value
        return None

    def __repr__(self) -> str:
        return f"<fn {self.name}>"

    __str__ = __repr__


@dataclass(eq=False, repr=False)
class NativeFunction(LoxCallable):
    """A host-supplied function; `fn` receives the evaluated arguments."""
    name: str
    num_params: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.num_params

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return "<native fn>"

    __str__ = __repr__
