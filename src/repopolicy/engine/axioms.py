# repopolicy:domain=engine
"""Axiom resolution: run every configured axiom plugin against the repository."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING

from repopolicy.engine.models import Result
from repopolicy.engine.registry import AXIOMS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from repopolicy.engine.registry import PluginRegistry
    from repopolicy.filesystem import FileSystem

logger = logging.getLogger(__name__)


async def _run_axiom(
    axiom_id: str, display_name: str, fs: FileSystem, registry: PluginRegistry
) -> tuple[str, Result]:
    if axiom_id not in registry:
        logger.warning("Unknown axiom '%s' configured as '%s'", axiom_id, display_name)
        return display_name, Result(f"invalid axiom name {axiom_id}", (), passed=False)

    axiom = registry.load(axiom_id)
    output = axiom(fs)
    if inspect.isawaitable(output):
        output = await output
    result = Result.coerce(output)
    logger.debug(
        "Axiom '%s' (%s) matched %d target(s)", display_name, axiom_id, len(result.targets)
    )
    return display_name, result


async def determine_targets(
    axiom_config: Mapping[str, str],
    fs: FileSystem,
    *,
    registry: PluginRegistry = AXIOMS,
) -> dict[str, Result]:
    """Run each configured axiom concurrently and map display name to result.

    *axiom_config* maps axiom plugin identifiers to the name results are
    reported under (``{"languages": "language"}``).  An unregistered
    identifier yields a failed result for that axiom only, but an exception
    raised by an axiom plugin propagates and cancels the remaining axioms.
    """
    tasks = [
        asyncio.ensure_future(_run_axiom(axiom_id, name, fs, registry))
        for axiom_id, name in axiom_config.items()
    ]
    try:
        resolved = await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        raise
    return dict(resolved)
