from .claims import ClaimRead, ClaimSubmission

__all__ = ["ClaimRead", "ClaimSubmission"]
