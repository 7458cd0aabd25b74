"""
Reunite - Pet Ownership Verification & Dispute Resolution

The workflow by which a person who found an animal and a person who claims
to own it are matched, exchange proof, reach a decision, and, when the
claimant disagrees with a rejection, escalate to an administrative review.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
