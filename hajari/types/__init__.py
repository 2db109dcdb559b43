"""Type definitions for Hajari."""

from .claims import ClaimListing, ClaimOutcome, ClaimRecord, ClaimSummary, RemovalNotice

__all__ = ["ClaimRecord", "ClaimSummary", "ClaimOutcome", "ClaimListing", "RemovalNotice"]
