# goalgraph/validate.py
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from pydantic import BaseModel

from goalgraph.cycles import find_cycles
from goalgraph.digest import compute_digest
from goalgraph.nary import check_consistency
from goalgraph.schema import ConstraintGroup, Cycle, GraphSnapshot, ValidationReport, check_well_formed

logger = logging.getLogger("goalgraph.validate")

_TRUTHY = {"1", "true", "yes", "on"}


# ----------------------------
# Config
# ----------------------------

class ValidateConfig(BaseModel):
    parallel: bool = False  # run both checkers on a two-worker thread pool
    digest: bool = False    # attach a GraphDigest to the report


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_config(**overrides) -> ValidateConfig:
    """ValidateConfig from GOALGRAPH_PARALLEL / GOALGRAPH_DIGEST, then keyword overrides."""
    values = {
        "parallel": _env_flag("GOALGRAPH_PARALLEL", False),
        "digest": _env_flag("GOALGRAPH_DIGEST", False),
    }
    values.update(overrides)
    return ValidateConfig(**values)


# ----------------------------
# Validation pass
# ----------------------------

def _run(snapshot: GraphSnapshot, parallel: bool) -> Tuple[List[Cycle], List[ConstraintGroup]]:
    if not parallel:
        return find_cycles(snapshot), check_consistency(snapshot)
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="goalgraph") as pool:
        cycles = pool.submit(find_cycles, snapshot)
        violations = pool.submit(check_consistency, snapshot)
        return cycles.result(), violations.result()


def validate(snapshot: GraphSnapshot, *, cfg: Optional[ValidateConfig] = None) -> ValidationReport:
    """
    Run cycle detection and n-ary consistency on one snapshot.
    Raises MalformedGraph before either checker runs if the snapshot is broken.
    """
    cfg = cfg or ValidateConfig()
    check_well_formed(snapshot)

    cycles, violations = _run(snapshot, cfg.parallel)
    digest = compute_digest(snapshot, cycles, violations) if cfg.digest else None

    logger.info(
        f"Validated {len(snapshot.nodes)} nodes / {len(snapshot.edges)} edges: "
        f"{len(cycles)} cycle(s), {len(violations)} n-ary violation(s)"
    )
    return ValidationReport(cycles=cycles, violations=violations, digest=digest)
