"""
Fund release protocols.

Releasers hand withdrawn value to recipients outside the vault.
"""

from omnivault.protocols.base import FundReleaser, ReleaseResult
from omnivault.protocols.direct import DirectReleaser, RecipientHandler
from omnivault.protocols.http import HttpReleaser

__all__ = [
    "FundReleaser",
    "ReleaseResult",
    "DirectReleaser",
    "RecipientHandler",
    "HttpReleaser",
]
