from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

# Canonical Data Model (CDM) for a parsed 997 Functional Acknowledgment.
# The segment stream is flat on the wire; these models hold the tree the walker rebuilds from it.

class CdmElement(BaseModel):
    """Represents a single data element within a segment."""
    value: str
    position: int

class CdmSegment(BaseModel):
    """Represents a single EDI segment."""
    segment_id: str
    elements: List[CdmElement]
    line_number: int
    raw_segment: str # Store the original segment string for reference

    def get_element(self, position: int) -> Optional[str]:
        """Retrieves the value of an element by its position (1-based index)."""
        if 1 <= position <= len(self.elements):
            return self.elements[position - 1].value
        return None

    def element(self, position: int) -> str:
        """Like get_element, but a missing element reads as an empty string."""
        return self.get_element(position) or ""

class Delimiters(BaseModel):
    """Control characters read from the fixed offsets of an ISA header."""
    model_config = ConfigDict(frozen=True)

    element_separator: str
    component_separator: str
    segment_terminator: str

class ElementError(BaseModel):
    """One AK4 data element error."""
    model_config = ConfigDict(frozen=True)

    position: str
    error: str
    value: str = ""
    code: str = ""

class SegmentError(BaseModel):
    """One AK3 segment error and the AK4 element errors reported under it."""
    segment_id: str
    position: str
    loop_id: str = ""
    error: str
    code: str = ""
    element_errors: List[ElementError] = Field(default_factory=list)

class TransactionAck(BaseModel):
    """One AK2...AK5 transaction set response."""
    document_type: str
    control_number: str
    segment_errors: List[SegmentError] = Field(default_factory=list)
    ack_code: Optional[str] = None
    ack_description: Optional[str] = None

class GroupResult(BaseModel):
    """One AK1...AK9 functional group response."""
    functional_id_code: str = ""
    group_control_number: str = ""
    ack_code: Optional[str] = None
    ack_description: Optional[str] = None
    included: str = ""
    received: str = "0"
    accepted: str = "0"

class FunctionalAckReport(BaseModel):
    """Everything a single walk over a 997 produced."""
    groups: List[GroupResult] = Field(default_factory=list)
    transactions: List[TransactionAck] = Field(default_factory=list)
    status: str = "A"

class SourceFile(BaseModel):
    """A file record handed over by the hosting environment."""
    type: str = "file"
    body: str
    file_name: str

class DataTag(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str

class FileClassification(BaseModel):
    is_997: bool
    file: SourceFile
    status: Optional[str] = None
    report: Optional[FunctionalAckReport] = None

class BatchDisposition(str, Enum):
    SKIPPED = "skipped"
    ERROR = "error"
    SUCCESS = "success"

class BatchResult(BaseModel):
    disposition: BatchDisposition
    files: List[SourceFile] = Field(default_factory=list)
