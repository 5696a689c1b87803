"""claimflow - lecturer claim validation and approval workflow."""

__version__ = "0.1.0"
