from __future__ import annotations

from pathlib import Path

from lazerlink.constants.link_modes import LinkMode
from lazerlink.context import Context
from lazerlink.logging import Ansi
from lazerlink.logging import log
from lazerlink.repositories.catalog import Catalog
from lazerlink.usecases.projection import ProjectionReport
from lazerlink.usecases.projection import materialize_many


def materialize_difference(
    ctx: Context,
    reference: Catalog,
    output_path: Path,
    mode: LinkMode = LinkMode.LINK,
) -> ProjectionReport:
    """Materialize only the sets of `ctx.catalog` which `reference` lacks."""
    reference_ids = reference.set_online_ids

    missing = [s for s in ctx.catalog if s.online_id not in reference_ids]
    log(
        f"{len(missing)} of {len(ctx.catalog)} sets are missing from the reference",
        Ansi.GRAY,
    )

    report = materialize_many(ctx, missing, output_path, mode)
    log(f"Materialized difference into {output_path}: {report}", Ansi.LGREEN)
    return report
