"""Exceptions raised by ledger repositories and use cases."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class NotFoundError(LedgerError):
    """Raised when an account, entry or family id does not exist."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class DuplicateValuationError(LedgerError):
    """Raised when a second valuation is written for an account and date."""

    def __init__(self, account_id: str, valuation_date) -> None:
        super().__init__(
            f"A valuation already exists for account {account_id} "
            f"on {valuation_date}"
        )
        self.account_id = account_id
        self.valuation_date = valuation_date


__all__ = ["LedgerError", "NotFoundError", "DuplicateValuationError"]
