import logging
import re
from typing import List, Optional, Union

from ack_defs import AckProcessingConfig
from cdm import CdmElement, CdmSegment, Delimiters

logger = logging.getLogger(__name__)

# ISA opening a segment: not part of a longer word, followed by an element separator.
ISA_HEADER_PATTERN = re.compile(r"(?<![A-Za-z0-9])ISA(?=[^A-Za-z0-9\s])")
LINE_BREAKS = ("\r", "\n")

class InterchangeHeaderError(ValueError):
    """Raised when the ISA header is too short to read the delimiters from."""

def find_interchange_header(edi_string: str, header_length: int = 106) -> Optional[str]:
    """
    Returns the fixed-width ISA window, or None when no segment starts with ISA
    (text such as "VISA only" does not count).
    The window may be shorter than header_length when the content is truncated.
    """
    match = ISA_HEADER_PATTERN.search(edi_string)
    if match is None:
        return None
    isa_start = match.start()
    # One extra character so a CR/LF right after the terminator is visible.
    return edi_string[isa_start:isa_start + header_length + 1]

def resolve_delimiters(isa_window: str, header_length: int = 106) -> Delimiters:
    terminator_offset = header_length - 1
    if len(isa_window) < header_length:
        raise InterchangeHeaderError(
            f"ISA header is {len(isa_window)} characters long, expected at least {header_length}"
        )

    # Positions are fixed in the X12 standard
    element_separator = isa_window[3]
    component_separator = isa_window[terminator_offset - 1]
    segment_terminator = isa_window[terminator_offset]
    if len(isa_window) > header_length and isa_window[header_length] in LINE_BREAKS:
        segment_terminator += isa_window[header_length]

    logger.debug(f"Delimiters detected: Element='{element_separator}', Segment={segment_terminator!r}, Component='{component_separator}'")
    return Delimiters(
        element_separator=element_separator,
        component_separator=component_separator,
        segment_terminator=segment_terminator,
    )

def split_segments(edi_string: str, segment_terminator: str) -> List[str]:
    """Splits content into non-blank segment strings, keeping their order."""
    segments = []
    for seg_str in edi_string.split(segment_terminator):
        # Trailing spaces belong to the last element; only line breaks are dropped.
        clean_seg = seg_str.lstrip().rstrip("\r\n")
        if not clean_seg.strip(): continue
        segments.append(clean_seg)
    return segments

def safe_split(text: Optional[str], separator: str, index: Optional[int] = None) -> Union[List[str], str]:
    """
    Splits a segment string into its fields.
    With an index, returns that field or an empty string when it does not exist.
    """
    parts = text.split(separator) if text else []
    if index is not None:
        return parts[index] if 0 <= index < len(parts) else ""
    return parts

def tokenize(edi_string: str, delimiters: Delimiters) -> List[CdmSegment]:
    segments = []
    for i, clean_seg in enumerate(split_segments(edi_string, delimiters.segment_terminator)):
        parts = clean_seg.split(delimiters.element_separator)
        segment_id = parts[0]
        elements: List[CdmElement] = [CdmElement(value=value, position=idx + 1) for idx, value in enumerate(parts[1:])]
        segments.append(CdmSegment(segment_id=segment_id, elements=elements, line_number=i + 1, raw_segment=clean_seg))
    return segments

class EdiParser:
    """Resolves the delimiters of one interchange and tokenizes its content."""

    def __init__(self, edi_string: str, config: Optional[AckProcessingConfig] = None):
        self.config = config or AckProcessingConfig()
        self.edi_string = edi_string
        self.isa_window = find_interchange_header(edi_string, self.config.isa_header_length)
        self.delimiters: Optional[Delimiters] = None
        self.all_segments: List[CdmSegment] = []

        if self.isa_window is None:
            logger.debug("No ISA marker found in content.")
            return

        self.delimiters = resolve_delimiters(self.isa_window, self.config.isa_header_length)
        self.all_segments = tokenize(edi_string, self.delimiters)
        logger.debug(f"Parser initialized with {len(self.all_segments)} segments.")

    @property
    def has_interchange(self) -> bool:
        return self.delimiters is not None

    def find_segment(self, segment_id: str) -> Optional[CdmSegment]:
        return next((segment for segment in self.all_segments if segment.segment_id == segment_id), None)

    def interchange_control_number(self) -> str:
        """ISA13, read from the fixed ISA window."""
        isa_header = self.isa_window[:self.config.isa_header_length] if self.isa_window else ""
        return safe_split(isa_header, self.delimiters.element_separator, 13) if self.delimiters else ""
