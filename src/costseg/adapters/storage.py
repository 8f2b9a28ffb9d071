from pathlib import Path
from typing import Mapping

import pandas as pd

EXPORT_FORMATS = ("csv", "parquet")


def write_df(df: pd.DataFrame, path: str) -> Path:
    """Write one table; the suffix picks the format (parquet needs pyarrow)."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix == ".parquet":
        df.to_parquet(out, index=False)
    else:
        df.to_csv(out, index=False)
    return out


def export_tables(tables: Mapping[str, pd.DataFrame], out_dir: Path, fmt: str = "csv") -> list[Path]:
    """Write each named table to `out_dir/<name>.<fmt>`."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"unsupported export format {fmt!r}; use one of {', '.join(EXPORT_FORMATS)}")
    return [write_df(df, str(Path(out_dir) / f"{name}.{fmt}")) for name, df in tables.items()]
