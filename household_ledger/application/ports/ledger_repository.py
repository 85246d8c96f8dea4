"""Application port for ledger data access."""

from datetime import date, datetime
from typing import Protocol

from household_ledger.domain.models import Account, Entry, Family


class LedgerRepositoryPort(Protocol):
    """Port exposing read and write access to families, accounts and entries.

    Lookups by id raise ``NotFoundError`` when the row does not exist.
    """

    def get_family(self, family_id: str) -> Family:
        """Return a family by id."""

    def get_account(self, account_id: str) -> Account:
        """Return an account by id."""

    def get_entry(self, entry_id: str) -> Entry:
        """Return an entry by id."""

    def list_accounts(
        self,
        family_id: str,
        visible_only: bool = True,
    ) -> list[Account]:
        """Return the family's accounts ordered by name."""

    def list_entries(
        self,
        account_id: str,
        end_date: date | None = None,
    ) -> list[Entry]:
        """Return the account's entries ordered by date."""

    def find_valuation(self, account_id: str, on_date: date) -> Entry | None:
        """Return the valuation entry of an account on a date, if any."""

    def latest_manual_rate_entry(
        self,
        account_id: str,
        target_currency: str,
    ) -> Entry | None:
        """Return the latest entry with a manual rate not in the target currency."""

    def latest_manual_rate_timestamp(self, family_id: str) -> datetime | None:
        """Return the newest updated_at of family entries with a manual rate."""

    def latest_entry_update(self, family_id: str) -> datetime | None:
        """Return the newest updated_at of any family entry."""

    def save_valuation(self, entry: Entry) -> Entry:
        """Insert or update a valuation entry in a single transaction.

        Raises ``DuplicateValuationError`` when another valuation already
        exists for the same account and date.
        """

    def insert_transaction(self, entry: Entry) -> Entry:
        """Insert a transaction entry."""

    def update_notes(self, entry_id: str, notes: str | None) -> Entry:
        """Update the notes of an entry."""

    def delete_entry(self, entry_id: str) -> Entry:
        """Delete an entry and return the removed row."""


__all__ = ["LedgerRepositoryPort"]
