# tidytopics/errors.py
"""
Error kinds raised by the topic pipeline.

Structural errors (missing input, empty matrix, invalid k, fitter timeout)
abort the run. UnknownDocumentError only fails the report that asked for
the document.
"""


class TopicPipelineError(Exception):
    """Base class for every error the pipeline raises on purpose."""


class MissingInputError(TopicPipelineError, FileNotFoundError):
    """Input directory is missing or holds no readable text files."""


class EmptyMatrixError(TopicPipelineError, ValueError):
    """Sparsity pruning removed every term or every document."""


class InvalidTopicCountError(TopicPipelineError, ValueError):
    """k is not a positive integer within the size of the matrix."""


class FitterTimeoutError(TopicPipelineError, TimeoutError):
    """The LDA fit did not finish within the configured timeout."""


class UnknownDocumentError(TopicPipelineError, KeyError):
    """Drill-down requested for a document id the matrix does not hold."""

    def __str__(self):
        # KeyError repr-quotes its message
        return str(self.args[0]) if self.args else ""
