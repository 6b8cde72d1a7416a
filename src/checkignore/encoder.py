"""Rendering of check-ignore results in the four output shapes.

Without ``--verbose`` only the path is printed; with it, the matching rule's source,
line number and pattern come first. Newline-terminated output C-quotes names that need
it, NUL-terminated output (``-z``) never quotes. Quiet mode never reaches the encoder.
"""

import os

from checkignore.quoting import quote_c_style, write_name_quoted
from checkignore.types import EvaluationOutcome, RuleMatched, RunConfiguration


class RuleOutcomeEncoder:
    """Turns one (path, outcome) pair into the bytes to write on stdout.

    Args:
        config: The run configuration. ``verbose``, ``null_terminated`` and
            ``show_non_matching`` select the output shape.

    Example:
        >>> from checkignore.types import MatchedRule, NoRuleMatched
        >>> rule = RuleMatched(MatchedRule(".gitignore", 3, "*.o"))
        >>> RuleOutcomeEncoder(RunConfiguration(verbose=True)).encode("build/output.o", rule)
        b'.gitignore:3:*.o\\t"build/output.o"\\n'
        >>> RuleOutcomeEncoder(RunConfiguration()).encode("main.c", NoRuleMatched())
        b''
    """

    def __init__(self, config: RunConfiguration) -> None:
        self.config = config
        self.terminator = b"\0" if config.null_terminated else b"\n"

    def encode(self, raw_argument: str, outcome: EvaluationOutcome) -> bytes:
        """Render the record for one path, or b"" when nothing is to be printed.

        Matched rules (negated ones included) are always printed. Paths that matched no
        rule, and tracked paths, are printed only with ``show_non_matching``, and then
        in the same empty-rule shape.
        """
        if not isinstance(outcome, RuleMatched) and not self.config.show_non_matching:
            return b""

        path = os.fsencode(raw_argument)
        if not self.config.verbose:
            return write_name_quoted(path, self.terminator)

        if self.config.null_terminated:
            return self._encode_verbose_null(path, outcome)
        return self._encode_verbose_text(path, outcome)

    def _encode_verbose_text(self, path: bytes, outcome: EvaluationOutcome) -> bytes:
        if isinstance(outcome, RuleMatched):
            rule = outcome.rule
            head = b"%s:%d:%s" % (
                quote_c_style(os.fsencode(rule.source_label)),
                rule.line_number,
                os.fsencode(rule.display_pattern),
            )
        else:
            head = b"::"
        return head + b"\t" + quote_c_style(path, force_quotes=True) + b"\n"

    def _encode_verbose_null(self, path: bytes, outcome: EvaluationOutcome) -> bytes:
        if isinstance(outcome, RuleMatched):
            rule = outcome.rule
            fields = [
                os.fsencode(rule.source_label),
                str(rule.line_number).encode("ascii"),
                os.fsencode(rule.display_pattern),
                path,
            ]
        else:
            fields = [b"", b"", b"", path]
        return b"".join(field + b"\0" for field in fields)
