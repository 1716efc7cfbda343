"""Shared query parameter parsing utilities."""

from fastapi import HTTPException

from integrations.csv_protocol import PortfolioSource


def parse_source(source: str | None) -> PortfolioSource | None:
    """Validate a single source query parameter.

    Raises:
        HTTPException: If the value is not a known source.
    """
    if not source:
        return None
    try:
        return PortfolioSource(source.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown source: {source}")


def parse_sources(sources: str | None) -> list[str] | None:
    """Parse a comma-separated sources string into a validated, de-duplicated list.

    Args:
        sources: Comma-separated source identifiers, or None.

    Returns:
        List of source values in the given order, or None if input is empty.

    Raises:
        HTTPException: If any entry is not a known source.
    """
    if not sources:
        return None
    result: list[str] = []
    for raw in sources.split(","):
        raw = raw.strip()
        if not raw:
            continue
        value = parse_source(raw).value
        if value not in result:
            result.append(value)
    return result if result else None
