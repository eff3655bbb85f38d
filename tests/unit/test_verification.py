"""
Unit tests for the verification code issuer and the verification state machine.
"""

import re

from verigate.domain.models import UserAccount, VerificationState
from verigate.domain.result import Err, ErrorKind
from verigate.domain.verification import CODE_LENGTH, VerificationCodeIssuer


class TestCodeIssuer:
    def test_code_is_64_lowercase_hex(self) -> None:
        code = VerificationCodeIssuer().issue()

        assert CODE_LENGTH == 64
        assert re.match(r"^[0-9a-f]{64}$", code)

    def test_codes_are_unique(self) -> None:
        issuer = VerificationCodeIssuer()

        assert len({issuer.issue() for _ in range(100)}) == 100

    def test_issued_code_passes_format_check(self) -> None:
        issuer = VerificationCodeIssuer()

        assert issuer.check_format(issuer.issue()) is None

    def test_format_check_rejects_none(self) -> None:
        assert VerificationCodeIssuer().check_format(None) == Err(
            ErrorKind.INVALID_REQUEST, "Verification code is required"
        )

    def test_format_check_counts_surrounding_whitespace(self) -> None:
        """Padding is not stripped before the length check."""
        issuer = VerificationCodeIssuer()

        assert issuer.check_format(" " + "a" * 63) is None
        assert issuer.check_format(" " + "a" * 64) == Err(
            ErrorKind.INVALID_REQUEST, "Invalid verification code format"
        )

    def test_build_link(self) -> None:
        link = VerificationCodeIssuer().build_link("https://app.example.com/", "ab" * 32)

        assert link == f"https://app.example.com/auth/verify?code={'ab' * 32}"


class TestVerificationState:
    def account(self, verified: bool) -> UserAccount:
        return UserAccount(id="1", name="Ada", email="a@example.com", password_hash="x", verified=verified)

    def test_state_of_account(self) -> None:
        assert VerificationState.of(self.account(False)) is VerificationState.UNVERIFIED
        assert VerificationState.of(self.account(True)) is VerificationState.VERIFIED

    def test_unverified_transitions_to_verified(self) -> None:
        assert VerificationState.UNVERIFIED.transition() == (VerificationState.VERIFIED, True)

    def test_verified_self_loop_changes_nothing(self) -> None:
        assert VerificationState.VERIFIED.transition() == (VerificationState.VERIFIED, False)

    def test_no_transition_leads_back_to_unverified(self) -> None:
        for state in VerificationState:
            next_state, _ = state.transition()
            assert next_state is not VerificationState.UNVERIFIED
