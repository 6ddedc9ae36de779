"""Payment verification strategies."""
from server.core.service.payment_verification.verifiers import (
    PaymentVerifier,
    SignatureVerifier,
    StatusPollVerifier,
    VerificationInput,
    VerificationResult,
    VerificationStatus,
    build_verifier,
    compute_signature,
)

__all__ = [
    "PaymentVerifier",
    "SignatureVerifier",
    "StatusPollVerifier",
    "VerificationInput",
    "VerificationResult",
    "VerificationStatus",
    "build_verifier",
    "compute_signature",
]
