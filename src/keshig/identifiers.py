from __future__ import annotations

import uuid
from collections.abc import Callable, Container

IdentifierFactory = Callable[[], str]


def new_identifier() -> str:
    return str(uuid.uuid4())


def unique_identifier(
    taken: Container[str],
    *,
    factory: IdentifierFactory = new_identifier,
) -> str:
    identifier = factory()
    while identifier in taken:
        identifier = factory()
    return identifier
