"""
Balance sheet builder tests (pure, no DB).

Covers section partitioning, sign display, line suppression, pool
linking and the memo-only market inventory.
"""

from datetime import date
from decimal import Decimal

from realty_config.schema import EngineConfig
from realty_engines.accumulator import accumulate
from realty_engines.classifier import Pool
from realty_engines.reference_index import EntityIndex
from realty_kernel.domain.entities import (
    Account,
    AccountType,
    LoanSubtype,
    TransactionType,
)
from realty_kernel.domain.snapshot import Scope
from realty_modules.reporting.config import ReportingConfig
from realty_modules.reporting.consistency import check
from realty_modules.reporting.statements import build_balance_sheet, link_pool_accounts

from tests.factories import (
    BANK,
    CASH,
    PROJECT_A,
    bill,
    category,
    expense,
    income,
    invoice,
    loan,
    metadata,
    snapshot,
    transfer,
    unit,
)

SALES = category("Unit Sales", TransactionType.INCOME)
REPAIRS = category("Repairs")
SECURITY = category("Security Deposit", TransactionType.INCOME)
RENTAL = category("Rental Income", TransactionType.INCOME)
OWNER_EQUITY = category("Owner Equity", TransactionType.INCOME)
CATEGORIES = (SALES, REPAIRS, SECURITY, RENTAL, OWNER_EQUITY)

SECURITY_LIABILITY = Account(
    id="acc-sec-liab", name="Security Deposit Liability", type=AccountType.LIABILITY,
)
RENTAL_LIABILITY = Account(
    id="acc-rent-liab", name="Rental Liability", type=AccountType.LIABILITY,
)
SECOND_SECURITY_LIABILITY = Account(
    id="acc-sec-liab-2", name="Old Security Liability", type=AccountType.LIABILITY,
)
CREDIT_LINE = Account(id="acc-credit", name="Credit Line", type=AccountType.LIABILITY)
CAPITAL = Account(id="acc-capital", name="Capital Account", type=AccountType.EQUITY)

AS_OF = date(2024, 12, 31)


def _sheet(
    accounts=(BANK, CASH),
    scope: Scope | None = None,
    config: ReportingConfig | None = None,
    **collections,
):
    config = config or ReportingConfig()
    collections.setdefault("categories", CATEGORIES)
    agg = accumulate(
        snapshot(accounts=accounts, **collections),
        scope or Scope.as_of_date(AS_OF),
        config.engine,
    )
    return build_balance_sheet(agg, config, metadata(as_of_date=AS_OF))


class TestSections:
    def test_assets_equity_and_retained_earnings(self):
        sheet = _sheet(transactions=(
            income(5000, category_id=OWNER_EQUITY.id),
            income(1000, category_id=SALES.id),
            expense(400, category_id=REPAIRS.id),
            transfer(600, BANK.id, CASH.id),
        ))

        assert [(a.account_id, a.balance) for a in sheet.assets.accounts] == [
            (BANK.id, Decimal("5000")),
            (CASH.id, Decimal("600")),
        ]
        assert sheet.equity.owner_contribution == Decimal("5000")
        assert sheet.equity.retained_earnings == Decimal("600")
        assert sheet.assets.total == Decimal("5600")
        assert sheet.total_liabilities_and_equity == Decimal("5600")
        assert sheet.is_balanced is True
        assert sheet.discrepancy == Decimal("0")

    def test_accruals_on_both_sides(self):
        sheet = _sheet(
            transactions=(income(1000, category_id=SALES.id),),
            invoices=(invoice(300, paid=100),),
            bills=(bill(250),),
        )
        assert sheet.assets.accounts_receivable == Decimal("200")
        assert sheet.liabilities.accounts_payable == Decimal("250")
        assert sheet.equity.retained_earnings == Decimal("950")
        assert sheet.is_balanced is True

    def test_loans(self):
        sheet = _sheet(transactions=(
            loan(1000, LoanSubtype.RECEIVE),
            loan(300, LoanSubtype.GIVE),
        ))
        assert sheet.liabilities.outstanding_loans == Decimal("1000")
        assert sheet.assets.loans_receivable == Decimal("300")
        assert sheet.assets.total == Decimal("1000")
        assert sheet.is_balanced is True

    def test_liability_and_equity_accounts_shown_sign_flipped(self):
        sheet = _sheet(
            accounts=(BANK, CREDIT_LINE, CAPITAL),
            transactions=(
                transfer(800, CREDIT_LINE.id, BANK.id),
                transfer(200, CAPITAL.id, BANK.id),
            ),
        )
        assert [(a.account_id, a.balance) for a in sheet.liabilities.accounts] == [
            (CREDIT_LINE.id, Decimal("800")),
        ]
        assert [(a.account_id, a.balance) for a in sheet.equity.accounts] == [
            (CAPITAL.id, Decimal("200")),
        ]
        assert sheet.is_balanced is True


class TestSuppression:
    def test_account_without_activity_hidden(self):
        sheet = _sheet(transactions=(income(100, category_id=SALES.id),))
        assert [a.account_id for a in sheet.assets.accounts] == [BANK.id]

    def test_account_with_zero_balance_hidden(self):
        sheet = _sheet(transactions=(
            income(100, category_id=SALES.id, account_id=CASH.id),
            transfer(100, CASH.id, BANK.id),
        ))
        assert [a.account_id for a in sheet.assets.accounts] == [BANK.id]

    def test_sub_epsilon_balance_hidden(self):
        sheet = _sheet(transactions=(
            income("100.00", category_id=SALES.id),
            expense("99.995", category_id=REPAIRS.id),
        ))
        assert sheet.assets.accounts == ()


class TestPoolLinking:
    def test_linked_account_shows_pool_without_direct_activity(self):
        sheet = _sheet(
            accounts=(BANK, SECURITY_LIABILITY),
            transactions=(income(1000, category_id=SECURITY.id),),
        )
        lines = sheet.liabilities.accounts
        assert [(a.account_id, a.balance, a.linked_pool) for a in lines] == [
            (SECURITY_LIABILITY.id, Decimal("1000"), "security_deposit"),
        ]
        assert sheet.liabilities.security_deposits_held == Decimal("0")
        assert sheet.liabilities.total == Decimal("1000")
        assert sheet.is_balanced is True

    def test_linked_account_ignores_its_ledger_balance(self):
        sheet = _sheet(
            accounts=(BANK, RENTAL_LIABILITY),
            transactions=(
                income(700, category_id=RENTAL.id),
                transfer(50, RENTAL_LIABILITY.id, BANK.id),
            ),
        )
        line = sheet.liabilities.accounts[0]
        assert line.balance == Decimal("700")
        assert sheet.liabilities.owner_funds_held == Decimal("0")

    def test_unlinked_pool_gets_its_own_line(self):
        sheet = _sheet(transactions=(income(1000, category_id=SECURITY.id),))
        assert sheet.liabilities.accounts == ()
        assert sheet.liabilities.security_deposits_held == Decimal("1000")

    def test_each_pool_links_one_account(self):
        links = link_pool_accounts(
            EntityIndex.from_snapshot(
                snapshot(accounts=(SECURITY_LIABILITY, SECOND_SECURITY_LIABILITY, RENTAL_LIABILITY))
            ),
            ReportingConfig(),
        )
        assert links == {
            SECURITY_LIABILITY.id: Pool.SECURITY_DEPOSIT,
            RENTAL_LIABILITY.id: Pool.OWNER_FUNDS,
        }

    def test_zero_pool_hides_linked_account(self):
        sheet = _sheet(accounts=(BANK, SECURITY_LIABILITY))
        assert sheet.liabilities.accounts == ()


class TestMarketInventory:
    def test_memo_only(self):
        sheet = _sheet(
            units=(unit("A1", 250000),),
            transactions=(income(100, category_id=SALES.id, project_id=PROJECT_A.id),),
        )
        assert sheet.market_inventory == Decimal("250000")
        assert sheet.assets.total == Decimal("100")
        assert sheet.is_balanced is True


class TestEndToEnd:
    def test_security_deposit_and_pm_cost_project(self):
        """Security deposit 1000 plus PM cost 1000 on one project."""
        pm_cost = category("Project Management Cost")
        config = ReportingConfig(engine=EngineConfig(pm_percentage=Decimal("10")))
        sheet = _sheet(
            config=config,
            scope=Scope.as_of_date(AS_OF, PROJECT_A.id),
            categories=CATEGORIES + (pm_cost,),
            transactions=(
                income(1000, category_id=SECURITY.id, project_id=PROJECT_A.id),
                expense(1000, category_id=pm_cost.id, project_id=PROJECT_A.id),
            ),
        )
        assert sheet.liabilities.security_deposits_held == Decimal("1000")
        assert sheet.equity.retained_earnings == Decimal("-1000")
        assert sheet.is_balanced is True

        result = check(sheet, config.engine)
        assert result.is_balanced is True
        assert result.total_assets == Decimal("0")
