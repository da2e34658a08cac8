"""Example pandas integration for CSV data analysis.

This example demonstrates how to use the pandas adapter to load CSV rows into
a DataFrame for analysis and write the result back out as CSV.
"""

import pandas as pd

from ultra_robust_csv.api import PandasAdapter, parse, write


def analyze_csv_with_pandas():
    """Example analysis of CSV data using pandas integration."""

    sales_csv = (
        "id,date,product,category,price,quantity\r\n"
        "1,2023-01-15,Laptop,Electronics,1200.00,2\r\n"
        "2,2023-01-16,Mouse,Electronics,25.00,5\r\n"
        '3,2023-01-16,"Keyboard, wireless",Electronics,75.00,3\r\n'
        "4,2023-01-17,Desk,Furniture,300.00,1\r\n"
    )

    print("CSV Data Analysis with Pandas Integration")
    print("=" * 45)

    adapter = PandasAdapter()
    if not adapter.is_available():
        print("pandas is not installed!")
        return

    # Convert to DataFrame
    print("1. Converting to DataFrame...")
    result = adapter.to_target(parse(sales_csv))
    if not result.success:
        print(f"Conversion failed: {result.errors}")
        return

    df = result.converted_data
    print(f"   ✓ Shape: {df.shape} ({result.conversion_time_ms:.2f}ms)")

    # Every cell is text; choose types explicitly
    df["price"] = pd.to_numeric(df["price"])
    df["quantity"] = pd.to_numeric(df["quantity"])
    df["revenue"] = df["price"] * df["quantity"]

    print("\n2. Revenue by category:")
    summary = df.groupby("category", as_index=False)["revenue"].sum()
    print(summary.to_string(index=False))

    # Back to CSV
    print("\n3. Writing summary as CSV...")
    rows = adapter.from_target(summary).converted_data
    print(write(rows, newline="\n"))


if __name__ == "__main__":
    analyze_csv_with_pandas()
