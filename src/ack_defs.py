# Code tables and settings for X12 997 Functional Acknowledgments
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict

# AK304 - Segment Syntax Error Code
AK3_SEGMENT_ERRORS: Mapping[str, str] = MappingProxyType({
    "1": "Unrecognized segment ID",
    "2": "Unexpected segment",
    "3": "Mandatory segment missing",
    "4": "Loop occurs over maximum times",
    "5": "Segment exceeds maximum use",
    "6": "Segment not in defined transaction set",
    "7": "Segment not in proper sequence",
    "8": "Segment has data element errors",
})

# AK403 - Data Element Syntax Error Code
AK4_ELEMENT_ERRORS: Mapping[str, str] = MappingProxyType({
    "1": "Mandatory data element missing",
    "2": "Conditional required data element missing",
    "3": "Too many data elements",
    "4": "Data element too short",
    "5": "Data element too long",
    "6": "Invalid character in data element",
    "7": "Invalid code value",
    "8": "Invalid date",
    "9": "Invalid time",
    "10": "Exclusion condition violated",
    "12": "Too many repetitions",
    "13": "Too many components",
    "16": "Composite data structure contains excess trailing delimiters",
})

# AK501 - Transaction Set Acknowledgment Code
AK5_TRANSACTION_CODES: Mapping[str, str] = MappingProxyType({
    "A": "Accepted",
    "E": "Accepted but errors were noted",
    "M": "Rejected, message authentication code (MAC) failed",
    "R": "Rejected",
    "W": "Rejected, assurance failed validity tests",
    "X": "Rejected, content after decryption could not be analyzed",
})

# AK901 - Functional Group Acknowledge Code
AK9_GROUP_CODES: Mapping[str, str] = MappingProxyType({
    "A": "Accepted",
    "E": "Accepted but errors were noted",
    "P": "Partially accepted",
    "R": "Rejected",
})


def describe_code(table: Mapping[str, str], code: str) -> str:
    """Looks up a code, falling back to a generic description for unknown codes."""
    description = table.get(code.strip()) if code else None
    if description is None:
        return f"Error code {code}"
    return description


def describe_segment_error(code: str) -> str:
    return describe_code(AK3_SEGMENT_ERRORS, code)


def describe_element_error(code: str) -> str:
    return describe_code(AK4_ELEMENT_ERRORS, code)


def describe_transaction_ack(code: str) -> str:
    return describe_code(AK5_TRANSACTION_CODES, code)


def describe_group_ack(code: str) -> str:
    return describe_code(AK9_GROUP_CODES, code)


class AckProcessingConfig(BaseModel):
    """Settings shared by the walker and the classifier."""
    model_config = ConfigDict(frozen=True)

    transaction_set_id: str = "997"
    accepted_code: str = "A"
    rejected_code: str = "R"
    isa_header_length: int = 106
    interchange_control_tag: str = "997 Ack File Interchange Control Number"
    group_control_tag: str = "997 Ack File Group Control Number"
    acked_group_control_tag: str = "997 Acked Group Control Number"
