"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/reporter.py
Turns classifications into report rows according to the report mode.

Filtering:
    report_unique       -> files whose content occurs once
    report_duplicate    -> none / all / first-only / all-but-first of each duplicate group
Ordering:
    lexical path order, or (size, digest) when grouping by digest
Annotations:
    count and digest columns, independent of each other and of the filters
"""

from typing import List

from uniqfiles.core.interfaces import Reporter
from uniqfiles.core.models import Classification, ReportRow, ReportDuplicate, UniqFilesParams


class ReporterImpl(Reporter):

    @staticmethod
    def is_reported(item: Classification, report_unique: bool, report_duplicate: ReportDuplicate) -> bool:
        if item.is_unique:
            return report_unique
        if report_duplicate == ReportDuplicate.ALL:
            return True
        if report_duplicate == ReportDuplicate.FIRST_ONLY:
            return item.is_first_of_group
        if report_duplicate == ReportDuplicate.ALL_BUT_FIRST:
            return not item.is_first_of_group
        return False

    def report(self, classifications: List[Classification], params: UniqFilesParams) -> List[ReportRow]:
        selected = [
            item for item in classifications
            if self.is_reported(item, params.report_unique, params.report_duplicate)
        ]

        if params.group_by_digest:
            # sorted() is stable: equal keys keep lexical path order
            selected = sorted(selected, key=lambda item: item.group_key)

        rows = []
        last_key = None
        for item in selected:
            key = item.group_key
            rows.append(ReportRow(
                path=item.path,
                count=item.occurrence_count,
                digest=item.digest,
                separator_before=params.group_by_digest and last_key is not None and key != last_key,
                show_count=params.count,
                show_digest=params.show_digest,
            ))
            last_key = key
        return rows
