"""
Simulated Bank Feed

Generates candidate transactions the way a connected bank account would
deliver them: bank-style descriptions, amounts within a plausible range,
dates within the last few weeks.

IMPORTANT: There is no real bank integration here. The feed exists so the
reconciliation path can be exercised end to end. Pass a seeded
``random.Random`` for reproducible batches.
"""

import random
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from findash.config import FeedSettings, get_settings
from findash.models.ledger import TransactionFields, TransactionKind


CENT = Decimal("0.01")


@dataclass(frozen=True)
class BankOption:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class FeedTemplate:
    description: str
    kind: TransactionKind
    category: str
    min_amount: Decimal
    max_amount: Decimal


BANK_OPTIONS = [
    BankOption(id="nubank", name="Nubank", color="#820AD1"),
    BankOption(id="itau", name="Itaú", color="#EC7000"),
    BankOption(id="bradesco", name="Bradesco", color="#CC092F"),
    BankOption(id="santander", name="Santander", color="#EC0000"),
    BankOption(id="inter", name="Inter", color="#FF7A00"),
]


def _template(description, kind, category, low, high) -> FeedTemplate:
    return FeedTemplate(description, kind, category, Decimal(low), Decimal(high))


INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE

TEMPLATES_BY_BANK: dict[str, list[FeedTemplate]] = {
    "nubank": [
        _template("Transfer Received - PIX", INCOME, "Salary", "1000", "3000"),
        _template("iFood *Ifood", EXPENSE, "Food", "30", "120"),
        _template("Uber *Trip", EXPENSE, "Transport", "15", "50"),
        _template("Spotify Premium", EXPENSE, "Leisure", "21.90", "21.90"),
        _template("Card Bill Payment", EXPENSE, "Other", "100", "500"),
    ],
    "itau": [
        _template("PIX TRANSF OWN ACCOUNT", INCOME, "Other", "200", "1000"),
        _template("MONTHLY ACCOUNT FEE", EXPENSE, "Other", "45", "45"),
        _template("SUPERMARKET DIA", EXPENSE, "Food", "150", "600"),
        _template("IPIRANGA GAS STATION", EXPENSE, "Transport", "100", "250"),
    ],
    "default": [
        _template("Debit Card Purchase", EXPENSE, "Other", "50", "200"),
        _template("Account Deposit", INCOME, "Freelance", "500", "1500"),
        _template("Drogasil Pharmacy", EXPENSE, "Health", "40", "150"),
    ],
}


class SimulatedBankFeed:
    """
    Candidate generator for a simulated bank connection.

    Each batch draws from the bank's own templates plus the default pool.
    Unknown bank ids use the default pool alone.
    """

    def __init__(
        self,
        settings: Optional[FeedSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        self._settings = settings or get_settings().feed
        self._rng = rng or random.Random(self._settings.seed)

    def template_pool(self, bank_id: str) -> list[FeedTemplate]:
        defaults = TEMPLATES_BY_BANK["default"]
        own = TEMPLATES_BY_BANK.get(bank_id)
        if own is None:
            return list(defaults)
        return own + defaults

    def random_amount(self, template: FeedTemplate) -> Decimal:
        span = template.max_amount - template.min_amount
        raw = template.min_amount + span * Decimal(str(self._rng.random()))
        return raw.quantize(CENT, rounding=ROUND_HALF_UP)

    def random_date(self, today: date) -> date:
        return today - timedelta(days=self._rng.randrange(self._settings.lookback_days))

    def fetch(self, bank_id: str, today: date) -> list[TransactionFields]:
        """Generate one batch of candidates for ``bank_id``."""
        pool = self.template_pool(bank_id)
        count = self._rng.randint(self._settings.min_items, self._settings.max_items)

        candidates = []
        for _ in range(count):
            template = self._rng.choice(pool)
            candidates.append(TransactionFields(
                description=template.description,
                amount=self.random_amount(template),
                kind=template.kind,
                category=template.category,
                date=self.random_date(today),
            ))
        return candidates
