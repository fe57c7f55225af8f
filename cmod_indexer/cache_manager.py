"""mtime-based freshness checks and parquet export for index files."""

from pathlib import Path

import polars as pl


def is_cache_fresh(cache_path: Path, *source_paths: Path | None) -> bool:
    """Check if cache file exists and is newer than all source files."""
    cache_path = Path(cache_path)
    if not cache_path.exists():
        return False
    cache_mtime = cache_path.stat().st_mtime
    for src in source_paths:
        if src is None:
            continue
        src = Path(src)
        if src.exists() and src.stat().st_mtime > cache_mtime:
            return False
    return True


def write_parquet(df: pl.DataFrame, cache_path: Path) -> None:
    """Write a Polars DataFrame to parquet."""
    cache_path = Path(cache_path)
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(cache_path)
