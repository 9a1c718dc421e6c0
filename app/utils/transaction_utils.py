# Shared utilities for bank-statement import

import io
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, List

import pandas as pd


CATEGORY_KEYWORDS = {
    "Food": ["mcdonald", "burger", "pizza", "ifood", "starbucks", "restaurant", "bakery", "market"],
    "Transportation": ["uber", "99app", "shell", "ipiranga", "fuel", "gas", "parking"],
    "Entertainment": ["netflix", "spotify", "hulu", "cinema", "theater"],
    "Shopping": ["amazon", "mercado livre", "shopee", "mall"],
    "Utilities": ["electric", "water", "internet", "phone", "vivo", "claro"],
    "Housing": ["rent", "condo", "landlord"],
    "Income": ["payroll", "salary", "deposit", "payment from"],
}

REQUIRED_COLUMNS = ("date", "description", "amount")


def parse_amount(raw) -> Decimal:
    """
    Parses amounts like:
      $1,234.56   1234.56   -$45.00   (45.00)   - 5.41   + 12.00   R$ 1.234,56
    and returns a signed Decimal. Whitespace is stripped aggressively.
    """
    s = str(raw)
    s = s.replace("\u00a0", " ")         # NBSP → space
    s = s.replace("R$", "").replace("$", "")
    s = re.sub(r"\s+", "", s)

    neg = False
    # Parentheses indicate negative
    m = re.match(r"^\((.*)\)$", s)
    if m:
        neg = True
        s = m.group(1)

    if s.startswith("+"):
        s = s[1:]
    elif s.startswith("-"):
        neg = True
        s = s[1:]

    # 1.234,56 -> 1234.56 ; 1,234.56 -> 1234.56
    if re.match(r"^\d{1,3}(\.\d{3})*,\d{1,2}$", s) or re.match(r"^\d+,\d{1,2}$", s):
        s = s.replace(".", "").replace(",", ".")
    else:
        s = s.replace(",", "")

    if not re.match(r"^\d+(?:\.\d+)?$", s):
        raise ValueError(f"Unrecognized amount format: {raw!r}")

    try:
        val = Decimal(s)
    except InvalidOperation:
        raise ValueError(f"Unrecognized amount format: {raw!r}")
    return -val if neg else val


def normalize_memo(description: str) -> str:
    s = (description or "").lower()
    s = re.sub(r"\b\d{2}/\d{2}(/\d{2,4})?\b", " ", s)
    s = re.sub(r"[^a-z0-9\s\.\-&/]", " ", s)
    return re.sub(r"\s+", " ", s).strip()


def auto_categorize(description: str) -> str:
    """Auto-categorize a transaction based on description keywords"""
    desc_lower = normalize_memo(description)
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in desc_lower for keyword in keywords):
            return category
    return "Other"


def read_statement_csv(contents: bytes) -> List[Dict]:
    """Parse a statement CSV into ``{date, description, amount}`` rows.

    Column names are matched case-insensitively; extra columns are ignored.
    """
    df = pd.read_csv(io.BytesIO(contents), dtype=str, skipinitialspace=True)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Statement is missing columns: {', '.join(missing)}")

    df = df.dropna(subset=["date", "amount"])
    df["description"] = df["description"].fillna("").str.strip()
    dates = pd.to_datetime(df["date"].str.strip(), errors="coerce", dayfirst=False, format="mixed")
    if dates.isna().any():
        bad = df.loc[dates.isna(), "date"].iloc[0]
        raise ValueError(f"Unrecognized date: {bad!r}")

    rows = []
    for when, description, amount in zip(dates, df["description"], df["amount"]):
        rows.append(
            {
                "date": when.date(),
                "description": description or "Unlabeled",
                "amount": parse_amount(amount),
            }
        )
    return rows
