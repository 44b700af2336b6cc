import argparse

from uniqfiles.core.models import ReportDuplicate

# Shortcut flags: each sets report_unique and report_duplicate together.
# Applied in command line order, so a later shortcut wins.
REPORT_ALIASES = {
    "-a": (True, ReportDuplicate.ALL),
    "-u": (True, ReportDuplicate.NONE),
    "-d": (False, ReportDuplicate.ALL),
    "-D": (False, ReportDuplicate.ALL_BUT_FIRST),
}

REPORT_ALIAS_HELP = {
    "-a": "Report all files (--report-unique --report-duplicate=all)",
    "-u": "Report only unique files (--report-unique --report-duplicate=none)",
    "-d": "Report only duplicated files, all of them (--no-report-unique --report-duplicate=all)",
    "-D": "Report duplicated files except the first copy (--no-report-unique --report-duplicate=all-but-first)",
}

REPORT_DUPLICATE_ALIASES = {
    "none": ReportDuplicate.NONE,
    "all": ReportDuplicate.ALL,
    "first-only": ReportDuplicate.FIRST_ONLY,
    "all-but-first": ReportDuplicate.ALL_BUT_FIRST,
    "0": ReportDuplicate.NONE,
    "1": ReportDuplicate.ALL,
    "2": ReportDuplicate.FIRST_ONLY,
    "3": ReportDuplicate.ALL_BUT_FIRST,
}

REPORT_DUPLICATE_CHOICES = list(REPORT_DUPLICATE_ALIASES.keys())

REPORT_DUPLICATE_HELP_TEXT = (
    "Which files of a duplicate group to report:\n"
    "  none (0)          : " + ReportDuplicate.NONE.description + "\n"
    "  all (1)           : " + ReportDuplicate.ALL.description + "\n"
    "  first-only (2)    : " + ReportDuplicate.FIRST_ONLY.description + " (default)\n"
    "  all-but-first (3) : " + ReportDuplicate.ALL_BUT_FIRST.description + "\n"
)

ALGORITHM_HELP_TEXT = (
    "Digest algorithm used to compare contents. Default: md5\n"
    "  md5, sha1, sha256, blake2b, ... : any hashlib algorithm\n"
    "  crc32                           : zlib CRC-32\n"
    "  xxh32, xxh64, xxh3_64, xxh128   : xxHash\n"
    "  hashlib / xxhash                : algorithm named by --algorithm-args\n"
    "  none, size                      : compare sizes only (fast, may give false positives)\n"
)


class ReportAliasAction(argparse.Action):
    """Sets both report options from one shortcut flag."""

    def __init__(self, option_strings, dest, **kwargs):
        kwargs.setdefault("nargs", 0)
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        report_unique, report_duplicate = REPORT_ALIASES[option_string]
        namespace.report_unique = report_unique
        namespace.report_duplicate = report_duplicate.value


EPILOG_TEXT = """
Examples:
  List all files which do not have duplicate contents
  %(prog)s *

  List all files which have duplicate contents
  %(prog)s -d *

  Move all duplicate files (except one copy) in this directory tree to .dupes/
  %(prog)s -D -R * | while read f; do mv "$f" .dupes/; done

  Same as above, but move them to the system trash (with confirmation prompt)
  %(prog)s -D -R --trash .

  List number of occurrences of contents for all files
  %(prog)s -a -c *

  List all files with occurrence count and BLAKE2b digest, grouped by digest
  %(prog)s -a -c --show-digest --group-by-digest -A blake2b *
"""
