from __future__ import annotations


class CompanySearchError(RuntimeError):
    """Base class for errors raised by the company search package."""


class IndexBuildError(CompanySearchError):
    """The offline build cannot read its source or write its artifact."""


class IndexLoadError(CompanySearchError):
    """The bucket artifact is missing, unreadable or malformed."""
