import time
from typing import Any, List

from tlox.callable import NativeFunction
from tlox.environment import Environment


def std_clock(args: List[Any]) -> float:
    return time.time()


def define_natives(env: Environment) -> Environment:
    """Bind the host-native functions into `env` (normally the globals)."""
    env.define('clock', NativeFunction('clock', 0, std_clock))
    return env
