from typing import Iterable, List, Optional
import logging

from ack_defs import AckProcessingConfig
from ack_walker import AckWalker
from cdm import BatchDisposition, BatchResult, DataTag, FileClassification, SourceFile
from edi_parser import EdiParser
from sinks import LogSink, TagSink, discard_tags

logger = logging.getLogger(__name__)

class AckProcessingService:
    """Classifies 997 acknowledgment files and decides the outcome of a batch."""

    def __init__(
        self,
        user_log: Optional[LogSink] = None,
        publish_tags: Optional[TagSink] = None,
        config: Optional[AckProcessingConfig] = None,
    ):
        self.user_log = user_log or logger
        self.publish_tags = publish_tags or discard_tags
        self.config = config or AckProcessingConfig()

    def classify_file(self, source_file: SourceFile) -> FileClassification:
        """
        Walks one file and reports whether it is a 997 and, if so, its group status.

        Args:
            source_file: The file record to classify

        Returns:
            FileClassification; files that are not 997s or fail to parse have is_997=False
        """
        try:
            parser = EdiParser(source_file.body, self.config)
            if not parser.has_interchange:
                logger.debug(f"{source_file.file_name}: no ISA marker, not a 997.")
                return FileClassification(is_997=False, file=source_file)

            st_segment = parser.find_segment("ST")
            transaction_set_id = st_segment.element(1) if st_segment else ""
            if transaction_set_id != self.config.transaction_set_id:
                logger.debug(f"{source_file.file_name}: transaction set '{transaction_set_id}' is not a {self.config.transaction_set_id}.")
                return FileClassification(is_997=False, file=source_file)

            gs_segment = parser.find_segment("GS")
            gs06 = gs_segment.element(6) if gs_segment else ""
            self.publish_tags([
                DataTag(label=self.config.interchange_control_tag, value=parser.interchange_control_number()),
                DataTag(label=self.config.group_control_tag, value=gs06),
            ])

            walker = AckWalker(source_file.file_name, self.user_log, self.publish_tags, self.config)
            report = walker.walk(parser.all_segments)
            logger.debug(f"{source_file.file_name}: 997 with status '{report.status}' ({len(report.transactions)} transactions).")
            return FileClassification(is_997=True, file=source_file, status=report.status, report=report)

        except Exception as e:
            logger.debug(f"Failed to process {source_file.file_name}", exc_info=True)
            self.user_log.error(f"Error processing file {source_file.file_name}: {e}")
            return FileClassification(is_997=False, file=source_file)

    def decide(self, classifications: Iterable[FileClassification]) -> BatchResult:
        accepted: List[SourceFile] = []
        rejected: List[SourceFile] = []
        for classification in classifications:
            if not classification.is_997:
                continue
            if classification.status == self.config.accepted_code:
                accepted.append(classification.file)
            else:
                rejected.append(classification.file)

        if not accepted and not rejected:
            # No 997s found
            return BatchResult(disposition=BatchDisposition.SKIPPED, files=[])
        if rejected:
            return BatchResult(disposition=BatchDisposition.ERROR, files=rejected)
        return BatchResult(disposition=BatchDisposition.SUCCESS, files=accepted)

    def process_batch(self, source_files: Iterable[SourceFile]) -> BatchResult:
        classifications = [self.classify_file(source_file) for source_file in source_files]
        result = self.decide(classifications)
        logger.info(f"Batch of {len(classifications)} files: {result.disposition.value} ({len(result.files)} files in payload)")
        return result
