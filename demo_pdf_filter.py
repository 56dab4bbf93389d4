#!/usr/bin/env python3
"""
Demo: apply PDF action tags to the example consent form.

Shows both rendering passes:
1. Blank form (no record bound)
2. Form with saved data (enum values substituted)
"""

import json
import logging

from pdftags.analyzer import analyze_directives
from pdftags.examples import build_example_consent_form
from pdftags.metadata_filter import filter_metadata
from pdftags.serialization import filter_result_to_dict


def print_fields(result):
    for f in result.fields:
        label = f.element_label.replace("\n", "\\n")
        print(f"  {f.field_name:<20} {f.element_type:<8} {label!r:<32} note={f.element_note!r}")


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    fields, data = build_example_consent_form(with_data=True)

    print("=" * 80)
    print("DIRECTIVE INVENTORY")
    print("=" * 80)
    report = analyze_directives(fields)
    for tag, count in sorted(report.tag_usage.items()):
        print(f"  {tag:<22} {count}")
    print(f"  Warnings: {report.warnings or 'none'}")

    print("\n" + "=" * 80)
    print("BLANK FORM")
    print("=" * 80)
    print_fields(filter_metadata(fields, {}))

    print("\n" + "=" * 80)
    print("FORM WITH SAVED DATA")
    print("=" * 80)
    result = filter_metadata(fields, data)
    print_fields(result)
    print("\n  Substituted data:")
    print(json.dumps(filter_result_to_dict(result)["data"], indent=2))


if __name__ == "__main__":
    main()
