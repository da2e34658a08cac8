#!/usr/bin/env python3
"""
Quick Start Guide for Ultra-Robust CSV.

This example walks through the progressive API: one-call functions, configured
tokenizers and writers, and lazy streaming in both directions.
"""

import io

from ultra_robust_csv import CSVTokenizer, CSVWriter, parse, write


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Ultra-Robust CSV")
    print("=" * 40)

    # Step 1: Write rows
    print("\n📝 Step 1: Writing rows")
    print("-" * 30)

    rows = [
        ["id", "product", "note"],
        ["1", "Laptop", 'Comes with "charger"'],
        ["2", "Desk, oak", "Two\nlines"],
        [],
    ]
    text = write(rows)
    print(repr(text))

    # Step 2: Parse it back
    print("\n🔍 Step 2: Parsing")
    print("-" * 30)

    parsed = parse(text).rows()
    print(f"✅ Round trip exact: {parsed == rows}")

    # Step 3: Messy input never raises
    print("\n🧹 Step 3: Malformed input")
    print("-" * 30)

    messy = 'a,"unclosed\nb\r\nmixed\nendings,"x"y\r\nno terminator'
    for row in parse(messy):
        print(f"  {row!r}")

    # Step 4: Dialects
    print("\n⚙️  Step 4: Dialects")
    print("-" * 30)

    writer = CSVWriter({"separator": "\t", "newline": "\n", "quoteAll": True})
    print(repr(writer.write([["a", "b"], ["c", "d"]])))
    tokenizer = CSVTokenizer(separator=";", quote="'")
    print(tokenizer.parse("'x;y';z\n").rows())

    # Step 5: Streaming
    print("\n🌊 Step 5: Streaming")
    print("-" * 30)

    def generated_rows():
        for i in range(3):
            yield [i, i * i]

    stream = CSVWriter().stream(generated_rows())
    print(f"First 5 characters: {stream.read(5)!r}")

    target = io.StringIO()
    written = CSVWriter(newline="\n").sink(target).write_rows(generated_rows())
    print(f"Sink wrote {written} characters")

    tokenizer = parse(io.BytesIO("\ufeffname\r\nZoë\r\n".encode("utf-8")))
    print(f"Decoded from bytes: {tokenizer.rows()}")
    print(f"Statistics: {tokenizer.statistics.to_dict()}")


if __name__ == "__main__":
    quick_start_example()
