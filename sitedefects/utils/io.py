from __future__ import annotations

import io as _io
import pandas as pd


def dataframe_to_excel_bytes(df: pd.DataFrame, sheet_name: str = "Sheet1") -> bytes:
    buf = _io.BytesIO()
    df.to_excel(buf, index=False, sheet_name=sheet_name)
    return buf.getvalue()


def frames_to_excel_bytes(frames: dict[str, pd.DataFrame]) -> bytes:
    buf = _io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in frames.items():
            df.to_excel(writer, index=False, sheet_name=name[:31])
    return buf.getvalue()
