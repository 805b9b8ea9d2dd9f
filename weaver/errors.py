from __future__ import annotations


class WeaverError(Exception):
    """Base exception for every build failure.

    Pipeline stages annotate the error with their name and re-raise it, so the
    original class survives for callers while the message reads like a trace:
    ``build_posts: broken.md: bad front matter format: ...``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stages: list[str] = []

    def add_stage(self, stage: str) -> WeaverError:
        self.stages.insert(0, stage)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.stages, self.message])


class FrontMatterError(WeaverError):
    pass


class MissingDelimiters(FrontMatterError):
    pass


class LeadingContentError(FrontMatterError):
    pass


class HeaderFormatError(FrontMatterError):
    pass


class RenderError(WeaverError):
    pass


class OutputWriteError(WeaverError):
    pass


class SourceReadError(WeaverError):
    pass


class ConfigError(WeaverError):
    pass
