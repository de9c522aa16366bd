# credstore/core/hooks.py
"""
Named start-up hooks.

Other components register callables under a hook name; the bootstrap
fires them at fixed points of the store start-up sequence.
"""
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

PRE_ENTITIES = "pre_entities"
POST_ENTITIES = "post_entities"

Hook = Callable[[Any], Any]


class HookRegistry:
    def __init__(self) -> None:
        self._hooks: Dict[str, List[Hook]] = defaultdict(list)

    def register(self, name: str, fn: Hook) -> Hook:
        """Register fn under name; it is called with the AppContext when name fires."""
        self._hooks[name].append(fn)
        return fn

    def registered(self, name: str) -> List[Hook]:
        return list(self._hooks.get(name, ()))

    async def fire(self, name: str, ctx: Any) -> None:
        """
        Call every hook registered under name, in registration order.

        Coroutine results are awaited before the next hook runs. Exceptions
        propagate to the caller.
        """
        hooks = self.registered(name)
        logger.debug("Firing %s (%d hooks)", name, len(hooks))
        for fn in hooks:
            result = fn(ctx)
            if inspect.isawaitable(result):
                await result
