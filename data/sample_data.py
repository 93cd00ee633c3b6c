"""Sample invoice and meter data for demos and tests."""

import os
import pandas as pd

from models.invoice import InvoiceTotals, BillingPeriod
from data.loader import parse_unit_usages

# A real-shaped monthly invoice; the itemised lines add up to total_amount.
SAMPLE_INVOICE = InvoiceTotals(
    basic_fee=1397760,
    power_fee=3238894,
    climate_fee=227079,
    fuel_fee=126155,
    power_factor_fee=-13977,
    vat=497591,
    power_fund=151760,
    round_down=-2,
    total_amount=5625260,
)
SAMPLE_BUILDING_TOTAL_USAGE = 25231
SAMPLE_BILLING_PERIOD = BillingPeriod(display_text="2025-6-10 ~ 2025-7-9")


def generate_usage_df() -> pd.DataFrame:
    """Meter readings for eight units, one of them vacant."""
    rows = [
        {"Unit": "201", "Move-in Date": "2024-03-01", "Previous Reading": 10234, "Current Reading": 10456, "Usage": 222},
        {"Unit": "202", "Move-in Date": "",           "Previous Reading": 8120,  "Current Reading": 8270,  "Usage": 150},
        {"Unit": "203", "Move-in Date": "2025-06-20", "Previous Reading": 5011,  "Current Reading": 5111,  "Usage": 100},
        {"Unit": "204", "Move-in Date": "",           "Previous Reading": 7300,  "Current Reading": 7300,  "Usage": 0},
        {"Unit": "301", "Move-in Date": "2023-11-15", "Previous Reading": 12950, "Current Reading": 13338, "Usage": 388},
        {"Unit": "302", "Move-in Date": "",           "Previous Reading": 9402,  "Current Reading": 9689,  "Usage": 287},
        {"Unit": "303", "Move-in Date": "",           "Previous Reading": 6700,  "Current Reading": 6845,  "Usage": 145},
        {"Unit": "304", "Move-in Date": "2022-01-10", "Previous Reading": 11100, "Current Reading": 11412, "Usage": 312},
    ]
    return pd.DataFrame(rows)


def generate_invoice_df() -> pd.DataFrame:
    """Invoice totals in Field/Amount layout."""
    rows = [
        {"Field": "Basic Fee", "Amount": SAMPLE_INVOICE.basic_fee},
        {"Field": "Power Fee", "Amount": SAMPLE_INVOICE.power_fee},
        {"Field": "Climate Fee", "Amount": SAMPLE_INVOICE.climate_fee},
        {"Field": "Fuel Fee", "Amount": SAMPLE_INVOICE.fuel_fee},
        {"Field": "Power Factor Fee", "Amount": SAMPLE_INVOICE.power_factor_fee},
        {"Field": "VAT", "Amount": SAMPLE_INVOICE.vat},
        {"Field": "Power Fund", "Amount": SAMPLE_INVOICE.power_fund},
        {"Field": "Round Down", "Amount": SAMPLE_INVOICE.round_down},
        {"Field": "Total Amount", "Amount": SAMPLE_INVOICE.total_amount},
        {"Field": "Total Usage", "Amount": SAMPLE_BUILDING_TOTAL_USAGE},
    ]
    return pd.DataFrame(rows)


def sample_usages():
    return parse_unit_usages(generate_usage_df())


def generate_sample_csvs(output_dir: str):
    """Write sample CSV files to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    generate_usage_df().to_csv(os.path.join(output_dir, "usage.csv"), index=False)
    generate_invoice_df().to_csv(os.path.join(output_dir, "invoice.csv"), index=False)


def generate_sample_excel(output_dir: str):
    """Write a single two-tab Excel file with usage and invoice sheets."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "sample_data.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_usage_df().to_excel(writer, sheet_name="Usage", index=False)
        generate_invoice_df().to_excel(writer, sheet_name="Invoice", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csvs(out)
    generate_sample_excel(out)
    print("Sample CSV and Excel files generated in sample_files/")
