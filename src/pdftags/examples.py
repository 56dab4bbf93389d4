"""
Example form builder used by the demo and the tests.

Builds a small consent form with one record over two events that
exercises every action tag the filter understands.
"""
from typing import List, Tuple

from pdftags.model import FieldDescriptor, RecordData


def build_example_consent_form(with_data: bool = True) -> Tuple[List[FieldDescriptor], RecordData]:
    fields = [
        FieldDescriptor(
            field_name="record_id",
            element_label="Record ID",
            misc="@HIDDEN-PDF",
        ),
        FieldDescriptor(
            field_name="participant_name",
            element_label="Participant name",
            element_note="First and last name",
            misc='@PDF-WHITESPACE="2" @PDF-FIELDNOTEEMPTY="Print in capital letters"',
        ),
        FieldDescriptor(
            field_name="consent_given",
            element_type="radio",
            element_enum="1, Yes\\n0, No",
            element_label="Consent given?",
            misc="@PDF-NOENUM",
        ),
        FieldDescriptor(
            field_name="witness",
            element_label="Witness signature",
            misc='@PDF-HIDDENDATA="consent_given"',
        ),
        FieldDescriptor(
            field_name="consent_date",
            element_type="text",
            element_label="Date of consent",
            element_note="DD-MM-YYYY",
            misc='@PDF-FIELDNOTEDATA="Recorded by study staff"',
        ),
        FieldDescriptor(
            field_name="site",
            element_type="select",
            element_enum="1, Berlin\\n2, Bochum\\n3, Vienna",
            element_label="Study site",
            misc="@PDF-DATANOENUM",
        ),
        FieldDescriptor(
            field_name="withdrawal_reason",
            element_type="notes",
            element_label="Reason for withdrawal",
            misc='@PDF-HIDDENNODATA="withdrawal_reason"',
        ),
        FieldDescriptor(
            field_name="staff_comment",
            element_type="notes",
            element_label="Staff comment",
            misc="@PDF-HIDDENNODATA",
        ),
    ]

    if not with_data:
        return fields, {}

    data: RecordData = {
        "101": {
            "baseline": {
                "record_id": "101",
                "participant_name": "Ada Lovelace",
                "consent_given": "1",
                "consent_date": "",
                "site": "2",
                "withdrawal_reason": "",
                "staff_comment": "",
            },
            "follow_up": {
                "record_id": "101",
                "participant_name": "Ada Lovelace",
                "consent_given": "",
                "consent_date": "12-03-2024",
                "site": "2",
                "withdrawal_reason": "",
                "staff_comment": "",
            },
        },
    }
    return fields, data
