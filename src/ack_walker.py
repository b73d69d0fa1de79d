import logging
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from ack_defs import (
    AckProcessingConfig,
    describe_element_error,
    describe_group_ack,
    describe_segment_error,
    describe_transaction_ack,
)
from cdm import (
    CdmSegment,
    DataTag,
    ElementError,
    FunctionalAckReport,
    GroupResult,
    SegmentError,
    TransactionAck,
)
from sinks import LogSink, TagSink

logger = logging.getLogger(__name__)

class WalkerState(BaseModel):
    """
    The cursors of a walk. ``transaction`` is the open AK2 loop, ``segment_error`` the AK3
    that subsequent AK4s attach to, and ``latched_code`` the first non-accepted AK901 seen.
    """
    group: Optional[GroupResult] = None
    transaction: Optional[TransactionAck] = None
    segment_error: Optional[SegmentError] = None
    latched_code: Optional[str] = None

    def reset_transaction(self):
        self.transaction = None
        self.segment_error = None

def format_transaction_message(transaction: TransactionAck) -> str:
    lines = [f"Transaction {transaction.document_type} #{transaction.control_number}: {transaction.ack_description}"]
    for seg_err in transaction.segment_errors:
        loop_info = f" (loop {seg_err.loop_id})" if seg_err.loop_id else ""
        lines.append(f"  Segment {seg_err.segment_id} at position {seg_err.position}{loop_info}: {seg_err.error}")
        for elem_err in seg_err.element_errors:
            value_info = f' [value: "{elem_err.value}"]' if elem_err.value else ""
            lines.append(f"    Element {elem_err.position}: {elem_err.error}{value_info}")
    return "\n".join(lines)

class AckWalker:
    """
    Single pass over the segments of one 997, rebuilding the AK1/AK2/AK3/AK4/AK5/AK9 tree.
    A new walker must be used for every file.
    """

    def __init__(
        self,
        file_name: str,
        user_log: LogSink,
        publish_tags: TagSink,
        config: Optional[AckProcessingConfig] = None,
    ):
        self.file_name = file_name
        self.user_log = user_log
        self.publish_tags = publish_tags
        self.config = config or AckProcessingConfig()
        self.state = WalkerState()
        self.report = FunctionalAckReport(status=self.config.accepted_code)
        self._handlers: Dict[str, Callable[[CdmSegment], None]] = {
            "AK1": self._on_ak1,
            "AK2": self._on_ak2,
            "AK3": self._on_ak3,
            "AK4": self._on_ak4,
            "AK5": self._on_ak5,
            "AK9": self._on_ak9,
        }

    @property
    def acked_group_control_number(self) -> str:
        return self.state.group.group_control_number if self.state.group else ""

    def walk(self, segments: List[CdmSegment]) -> FunctionalAckReport:
        for segment in segments:
            handler = self._handlers.get(segment.segment_id)
            if handler:
                handler(segment)

        if self.state.transaction is not None:
            logger.debug(f"Dropping transaction {self.state.transaction.control_number} with no AK5 in {self.file_name}")
        self.state.reset_transaction()
        return self.report

    def _on_ak1(self, segment: CdmSegment):
        group = GroupResult(functional_id_code=segment.element(1), group_control_number=segment.element(2))
        self.state.group = group
        self.report.groups.append(group)
        self.publish_tags([DataTag(label=self.config.acked_group_control_tag, value=group.group_control_number)])

    def _on_ak2(self, segment: CdmSegment):
        if self.state.transaction is not None:
            logger.debug(f"Discarding unflushed transaction {self.state.transaction.control_number} in {self.file_name}")
        self.state.transaction = TransactionAck(document_type=segment.element(1), control_number=segment.element(2))
        self.state.segment_error = None

    def _on_ak3(self, segment: CdmSegment):
        error_code = segment.element(4)
        seg_err = SegmentError(
            segment_id=segment.element(1),
            position=segment.element(2),
            loop_id=segment.element(3),
            error=describe_segment_error(error_code),
            code=error_code,
        )
        if self.state.transaction is None:
            logger.debug(f"AK3 for segment '{seg_err.segment_id}' outside of an AK2 loop in {self.file_name}; ignored.")
            self.state.segment_error = None
            return
        self.state.transaction.segment_errors.append(seg_err)
        self.state.segment_error = seg_err

    def _on_ak4(self, segment: CdmSegment):
        if self.state.segment_error is None:
            logger.debug(f"AK4 with no preceding AK3 in {self.file_name}; ignored.")
            return
        error_code = segment.element(3)
        self.state.segment_error.element_errors.append(ElementError(
            position=segment.element(2) or segment.element(1),
            error=describe_element_error(error_code),
            value=segment.element(4),
            code=error_code,
        ))

    def _on_ak5(self, segment: CdmSegment):
        transaction = self.state.transaction
        if transaction is None or not transaction.document_type:
            logger.debug(f"AK5 with no open transaction in {self.file_name}; ignored.")
            return

        ack_code = segment.element(1)
        transaction.ack_code = ack_code
        transaction.ack_description = describe_transaction_ack(ack_code)
        message = format_transaction_message(transaction)
        if ack_code == self.config.rejected_code:
            self.user_log.error(message)
        else:
            self.user_log.info(message)

        self.report.transactions.append(transaction)
        self.state.reset_transaction()

    def _on_ak9(self, segment: CdmSegment):
        ak901 = segment.element(1)
        ack_desc = describe_group_ack(ak901)
        received = segment.element(3) or "0"
        accepted = segment.element(4) or "0"
        group_control_number = self.acked_group_control_number

        if self.state.group is not None:
            self.state.group.ack_code = ak901
            self.state.group.ack_description = ack_desc
            self.state.group.included = segment.element(2)
            self.state.group.received = received
            self.state.group.accepted = accepted

        self.user_log.info(f"Functional Group Result for {group_control_number}: {ack_desc} - {accepted}/{received} transactions accepted")

        # First non-accepted code wins; later AK9s are still reported.
        if ak901.upper() != self.config.accepted_code and self.state.latched_code is None:
            self.state.latched_code = ak901
            self.report.status = ak901
            self.user_log.error(f"997 acknowledging Group Control Number {group_control_number} Not Accepted (AK901={ak901}) in file {self.file_name}")
        else:
            self.user_log.info(f"997 acknowledging Group Control Number {group_control_number} {ack_desc} (AK901={ak901}) in file {self.file_name}.")
