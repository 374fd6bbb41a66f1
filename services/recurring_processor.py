import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

from database.ledger_store import ConcurrentUpdateError, LedgerStore, StoreError
from models.recurring_template import RecurringTemplate
from models.transaction import Transaction, TransactionDraft
from utils.constants import (
    AUTO_PREFIX, FREQUENCY_MONTHLY, FREQUENCY_WEEKLY, KIND_TRANSFER, LEDGER_KINDS,
    TRANSFER_IN_CATEGORY, TRANSFER_OUT_CATEGORY, UNKNOWN_WALLET_NAME,
    WEEKLY_INTERVAL_DAYS,
)
from utils.date_helpers import calendar_date, format_date, format_timestamp, now, to_datetime

logger = logging.getLogger(__name__)


class TemplateConfigError(ValueError):
    """The template cannot be materialized as configured."""


@dataclass
class TemplateError:
    template: str
    error: str


@dataclass
class ProcessResult:
    processed: list[str] = field(default_factory=list)
    errors: list[TemplateError] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> str:
        """One-line description for a banner or toast."""
        count = len(self.processed)
        text = f"{count} recurring template{'s' if count != 1 else ''} generated"
        if self.errors:
            text += f", {len(self.errors)} failed"
        return text + "."


class RecurringProcessor:
    """Materializes due recurring templates into ledger transactions.

    Runs synchronously. Invocations for the same user are serialized, and the
    last-generated marker is advanced with a compare-and-swap inside the same
    atomic store unit as the transaction writes, so a template is never
    materialized twice for one occurrence.
    """

    def __init__(self, store: LedgerStore, clock: Callable[[], datetime] = now):
        self._store = store
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ── Public API ───────────────────────────────────────────────────────────

    def process_due_templates(
        self, user_id: str, as_of: date | datetime | None = None
    ) -> ProcessResult:
        """Materialize every active template of `user_id` that is due on `as_of`.

        Per-template failures are collected in the result. Only a failure to
        list the templates raises (StoreError).
        """
        run_at = self._run_time(as_of)
        result = ProcessResult()

        with self._user_lock(user_id):
            templates = self._store.list_active_templates(user_id)
            logger.info(
                "Processing %d active recurring template(s) for user %s as of %s",
                len(templates), user_id, format_date(run_at.date()),
            )
            for template in templates:
                try:
                    due = self.is_due(template, run_at)
                except TemplateConfigError as e:
                    self._record_error(result, template, e)
                    continue
                if due:
                    self._materialize(template, run_at, result)

        logger.info("Recurring run for user %s: %s", user_id, result.summary())
        return result

    def generate_now(
        self, template_id: int, as_of: date | datetime | None = None
    ) -> ProcessResult:
        """Materialize one template immediately, skipping the due-date check."""
        run_at = self._run_time(as_of)
        result = ProcessResult()
        label = f"Template #{template_id}"

        try:
            template = self._store.get_template(template_id)
        except StoreError as e:
            result.errors.append(TemplateError(template=label, error=str(e)))
            return result
        if template is None:
            result.errors.append(TemplateError(template=label, error="Template not found"))
            return result

        with self._user_lock(template.user_id):
            # Re-read under the lock so the marker we compare against is current
            try:
                template = self._store.get_template(template_id) or template
            except StoreError as e:
                self._record_error(result, template, e)
                return result
            logger.info("Manual generation of recurring template %r (id=%s)",
                        template.description, template.id)
            self._materialize(template, run_at, result)
        return result

    def is_due(self, template: RecurringTemplate, as_of: date | datetime) -> bool:
        """True when `template` should fire on the calendar day of `as_of`.

        Monthly: the day of month matches exactly (a day-31 template skips
        shorter months) and it has not fired on that day yet.
        Weekly: never fired, or fired at least 7 days before.
        """
        if not template.is_active:
            return False

        run_day = as_of.date() if isinstance(as_of, datetime) else as_of
        last = calendar_date(template.last_generated)
        if template.last_generated and last is None:
            raise TemplateConfigError(
                f"Invalid last generated timestamp: {template.last_generated!r}"
            )

        if template.frequency == FREQUENCY_MONTHLY:
            if template.day_of_month != run_day.day:
                return False
            return last is None or last < run_day

        if template.frequency == FREQUENCY_WEEKLY:
            return last is None or (run_day - last).days >= WEEKLY_INTERVAL_DAYS

        raise TemplateConfigError(f"Unsupported frequency: {template.frequency}")

    def build_transactions(
        self, template: RecurringTemplate, as_of: date | datetime
    ) -> list[TransactionDraft]:
        """Ledger rows for one occurrence of `template`, dated `as_of`.

        Raises TemplateConfigError before anything is written.
        """
        if template.amount <= 0:
            raise TemplateConfigError("Amount must be positive")

        tx_date = format_date(as_of.date() if isinstance(as_of, datetime) else as_of)
        if template.kind == KIND_TRANSFER:
            return self._build_transfer(template, tx_date)
        if template.kind not in LEDGER_KINDS:
            raise TemplateConfigError(f"Unsupported template kind: {template.kind}")

        amounts = {
            kind: template.amount if kind == template.kind else 0
            for kind in LEDGER_KINDS
        }
        return [
            TransactionDraft(
                user_id=template.user_id,
                wallet_id=template.wallet_id,
                description=f"{AUTO_PREFIX} {template.description}",
                category=template.category,
                date=tx_date,
                is_transfer=False,
                recurring_template_id=template.id,
                **amounts,
            )
        ]

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _build_transfer(
        self, template: RecurringTemplate, tx_date: str
    ) -> list[TransactionDraft]:
        source, target = template.wallet_id, template.target_wallet_id
        if target is None:
            raise TemplateConfigError("Missing target wallet")
        if target == source:
            raise TemplateConfigError("Source and target wallet must differ")

        names = self._wallet_names([source, target])
        source_name = names.get(source) or UNKNOWN_WALLET_NAME
        target_name = names.get(target) or UNKNOWN_WALLET_NAME

        common = dict(
            user_id=template.user_id,
            date=tx_date,
            is_transfer=True,
            transfer_from_wallet_id=source,
            transfer_to_wallet_id=target,
            recurring_template_id=template.id,
        )
        withdrawal = TransactionDraft(
            wallet_id=source,
            description=f"{AUTO_PREFIX} Transfer ke {target_name}",
            category=TRANSFER_OUT_CATEGORY,
            outcome=template.amount,
            **common,
        )
        deposit = TransactionDraft(
            wallet_id=target,
            description=f"{AUTO_PREFIX} Transfer dari {source_name}",
            category=TRANSFER_IN_CATEGORY,
            income=template.amount,
            **common,
        )
        return [withdrawal, deposit]

    def _wallet_names(self, wallet_ids: list[int]) -> dict[int, str]:
        """Names are cosmetic; a failed lookup falls back to the placeholder."""
        try:
            return self._store.get_wallet_names(wallet_ids)
        except StoreError as e:
            logger.warning("Wallet name lookup failed, using placeholder: %s", e)
            return {}

    def _materialize(
        self, template: RecurringTemplate, run_at: datetime, result: ProcessResult
    ):
        try:
            drafts = self.build_transactions(template, run_at)
            with self._store.atomic():
                created = [self._store.append_transaction(d) for d in drafts]
                marked = self._store.mark_template_generated(
                    template.id, format_timestamp(run_at), template.last_generated
                )
                if not marked:
                    raise ConcurrentUpdateError(
                        "Template was already generated by another run"
                    )
        except (TemplateConfigError, StoreError) as e:
            self._record_error(result, template, e)
            return

        result.processed.append(template.description)
        result.transactions.extend(created)
        logger.info(
            "Generated %d transaction(s) from recurring template %r (id=%s)",
            len(created), template.description, template.id,
        )

    @staticmethod
    def _record_error(result: ProcessResult, template: RecurringTemplate, error: Exception):
        logger.warning(
            "Recurring template %r (id=%s) failed: %s",
            template.description, template.id, error,
        )
        result.errors.append(TemplateError(template=template.description, error=str(error)))

    def _run_time(self, as_of: date | datetime | None) -> datetime:
        return self._clock() if as_of is None else to_datetime(as_of)

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(user_id, threading.Lock())
