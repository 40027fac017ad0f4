from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from quorum.engine import PolicyResolver, get_holiday_provider


def get_policy_resolver() -> PolicyResolver:
    """Resolver backed by the shared holiday provider."""
    return PolicyResolver(get_holiday_provider())


ResolverDep = Annotated[PolicyResolver, Depends(get_policy_resolver)]
