"""Fold per-target outcomes into the result table."""

from fleet_facts.models import ResultRow, Target

DEFAULT_FACT = ""


def aggregate(targets: list[Target], commands: dict[str, str]) -> list[ResultRow]:
    """Build one row per target, in input order.

    Every row carries every command label; labels without a collected
    value get ``DEFAULT_FACT``.
    """
    rows = []
    for target in targets:
        rows.append(
            ResultRow(
                id=target.id,
                name=target.name,
                addresses=list(target.addresses),
                facts={
                    label: target.facts.get(label, DEFAULT_FACT) for label in commands
                },
                error=target.error.to_dict() if target.error is not None else None,
            )
        )
    return rows
